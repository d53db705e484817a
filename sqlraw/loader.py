"""SQL file loader for aiosql-style named queries.

A query file holds any number of statements, each introduced by a
``-- name: <query_name>`` line::

    -- name: get_pets_by_owner_name_and_type
    SELECT pets.name, pets.id
    FROM pets
      JOIN people ON pets.owner_id = people.id
    WHERE people.name = ? AND pets.type = ?;

Named statements are turned into :class:`~sqlraw.statement.QuerySpec`
objects bound to the caller's positional parameters.
"""

import hashlib
import re
from difflib import get_close_matches
from pathlib import Path
from typing import Any, Final, Union

from sqlraw.exceptions import SQLFileNotFoundError, SQLFileParseError
from sqlraw.statement import QuerySpec
from sqlraw.utils.logging import get_logger

__all__ = ("NamedStatement", "SQLFile", "SQLFileLoader")

logger = get_logger("loader")

# Matches: -- name: query_name, keeping aiosql suffixes such as ! or $ for trimming
QUERY_NAME_PATTERN: Final = re.compile(
    r"^[ \t]*--[ \t]*name[ \t]*:[ \t]*([\w-]+[^\w\s]*)[ \t]*$", re.MULTILINE | re.IGNORECASE
)
TRIM_SPECIAL_CHARS: Final = re.compile(r"[^\w-]")


def _normalize_query_name(name: str) -> str:
    """Normalize query name to be a valid Python identifier.

    Strips aiosql special suffixes (``!``, ``$``, ``*`` ...) and replaces
    hyphens with underscores.
    """
    return TRIM_SPECIAL_CHARS.sub("", name).replace("-", "_")


class NamedStatement:
    """A SQL statement parsed from a file."""

    __slots__ = ("name", "source", "sql", "start_line")

    def __init__(self, name: str, sql: str, source: str, start_line: int = 0) -> None:
        self.name = name
        self.sql = sql
        self.source = source
        self.start_line = start_line

    def __repr__(self) -> str:
        return f"NamedStatement(name={self.name!r}, source={self.source!r}, start_line={self.start_line})"


class SQLFile:
    """A loaded SQL file with its content checksum."""

    __slots__ = ("checksum", "content", "path")

    def __init__(self, content: str, path: str) -> None:
        self.content = content
        self.path = path
        self.checksum = hashlib.md5(content.encode(), usedforsecurity=False).hexdigest()


class SQLFileLoader:
    """Loads and parses SQL files with aiosql-style named queries.

    Example:
        ```python
        loader = SQLFileLoader()
        loader.load_sql("queries/pets.sql")

        spec = loader.get_sql("get_pets_by_owner_name_and_type", "Ann Duong", "dog")
        result = await executor.execute_spec(spec)
        ```
    """

    __slots__ = ("_files", "_queries", "encoding")

    def __init__(self, *, encoding: str = "utf-8") -> None:
        self.encoding = encoding
        self._queries: dict[str, NamedStatement] = {}
        self._files: dict[str, SQLFile] = {}

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name in self._queries

    def _read_file_content(self, path: Union[str, Path]) -> str:
        """Read a SQL file.

        Raises:
            SQLFileNotFoundError: If the file does not exist.
            SQLFileParseError: If the file cannot be read or decoded.
        """
        file_path = Path(path)
        if not file_path.is_file():
            msg = f"SQL file not found: {file_path}"
            raise SQLFileNotFoundError(msg)
        try:
            return file_path.read_text(encoding=self.encoding)
        except (OSError, UnicodeDecodeError) as e:
            msg = f"Could not read SQL file {file_path}: {e}"
            raise SQLFileParseError(msg) from e

    @staticmethod
    def _parse_sql_content(content: str, file_path: str) -> "dict[str, NamedStatement]":
        """Extract named statements from SQL file content.

        Args:
            content: Raw SQL file content to parse
            file_path: File path for error reporting

        Raises:
            SQLFileParseError: If no named statements are found or a name repeats.

        Returns:
            Mapping of normalized statement names to statements.
        """
        statements: dict[str, NamedStatement] = {}
        name_matches = list(QUERY_NAME_PATTERN.finditer(content))
        if not name_matches:
            msg = f"No named SQL statements found (-- name: statement_name) in {file_path}"
            raise SQLFileParseError(msg)

        for i, match in enumerate(name_matches):
            statement_name = _normalize_query_name(match.group(1).strip())
            start_line = content[: match.start()].count("\n") + 1
            end_pos = name_matches[i + 1].start() if i + 1 < len(name_matches) else len(content)
            statement_sql = content[match.end() : end_pos].strip()
            if not statement_sql:
                msg = f"Statement {statement_name!r} at {file_path}:{start_line} has no SQL"
                raise SQLFileParseError(msg)
            if statement_name in statements:
                msg = f"Duplicate statement name {statement_name!r} at {file_path}:{start_line}"
                raise SQLFileParseError(msg)
            statements[statement_name] = NamedStatement(
                name=statement_name, sql=statement_sql.rstrip(";").rstrip(), source=file_path, start_line=start_line
            )
        return statements

    def _load_single_file(self, file_path: Path) -> None:
        path_str = str(file_path)
        content = self._read_file_content(file_path)
        sql_file = SQLFile(content=content, path=path_str)
        existing = self._files.get(path_str)
        if existing is not None and existing.checksum == sql_file.checksum:
            logger.debug("SQL file %s unchanged, skipping", path_str)
            return

        statements = self._parse_sql_content(content, path_str)
        for name, statement in statements.items():
            current = self._queries.get(name)
            if current is not None and current.source != path_str:
                msg = f"Statement {name!r} in {path_str} is already defined in {current.source}"
                raise SQLFileParseError(msg)
        for stale in [name for name, statement in self._queries.items() if statement.source == path_str]:
            del self._queries[stale]
        self._queries.update(statements)
        self._files[path_str] = sql_file
        logger.debug("Loaded %d statements from %s", len(statements), path_str)

    def load_sql(self, *paths: Union[str, Path]) -> None:
        """Load SQL files, or every ``*.sql`` file under a directory.

        Args:
            *paths: Files or directories to load.

        Raises:
            SQLFileNotFoundError: If a path does not exist.
            SQLFileParseError: If a file has no named statements or redefines a name.
        """
        for path in paths:
            candidate = Path(path)
            if candidate.is_dir():
                for file_path in sorted(candidate.rglob("*.sql")):
                    self._load_single_file(file_path)
            else:
                self._load_single_file(candidate)

    def add_named_sql(self, name: str, sql: str) -> None:
        """Register a named statement without a backing file."""
        normalized = _normalize_query_name(name)
        if normalized in self._queries:
            msg = f"Statement {normalized!r} is already defined"
            raise SQLFileParseError(msg)
        self._queries[normalized] = NamedStatement(name=normalized, sql=sql.strip(), source="<memory>")

    def has_query(self, name: str) -> bool:
        return _normalize_query_name(name) in self._queries

    def list_queries(self) -> "list[str]":
        return sorted(self._queries)

    def list_files(self) -> "list[str]":
        return sorted(self._files)

    def get_query(self, name: str) -> NamedStatement:
        """Get a named statement.

        Raises:
            SQLFileNotFoundError: If no statement has that name. Close matches are suggested.
        """
        normalized = _normalize_query_name(name)
        statement = self._queries.get(normalized)
        if statement is None:
            msg = f"Statement {name!r} not found"
            suggestions = get_close_matches(normalized, list(self._queries), n=3, cutoff=0.6)
            if suggestions:
                msg += f". Did you mean: {', '.join(suggestions)}?"
            raise SQLFileNotFoundError(msg)
        return statement

    def get_sql(self, name: str, *parameters: Any) -> QuerySpec:
        """Build a :class:`QuerySpec` for a named statement.

        Args:
            name: Statement name.
            *parameters: Positional parameters for the statement's placeholders.

        Returns:
            The statement bound to ``parameters``.
        """
        statement = self.get_query(name)
        return QuerySpec(statement.sql, parameters, name=statement.name)

    def get_file_content(self, path: Union[str, Path]) -> str:
        """Read a SQL file as a raw script, without parsing named statements."""
        return self._read_file_content(path)

    def clear_cache(self) -> None:
        self._queries.clear()
        self._files.clear()
