"""
Column DDL rendering.

The render_* functions are pure: given a ColumnMetadata and its already
resolved target type they return one column clause of a CREATE TABLE
statement. column_definition() resolves the type and runs the enum value
probes through a TypeMapper before rendering.
"""

import logging
from typing import TYPE_CHECKING, Any, Iterable, List, Optional, Sequence, Tuple

from .columns import ColumnMetadata, Dialect, parse_target

if TYPE_CHECKING:
    from .mappers.base import TypeMapper

logger = logging.getLogger(__name__)

# Character columns at most this varied and shorter than ENUM_MAX_LENGTH
# are rendered as a MySQL ENUM of their current values
ENUM_MAX_DISTINCT_VALUES = 16
ENUM_MAX_LENGTH = 64

# Precision used for a MySQL DECIMAL whose source declared a scale but no precision
MYSQL_MAX_DECIMAL_PRECISION = 65

INTEGER_TYPES = frozenset({"TINYINT", "SMALLINT", "MEDIUMINT", "INT", "INTEGER", "BIGINT"})
FRACTIONAL_SECONDS_TYPES = frozenset({"DATETIME", "TIMESTAMP", "TIME"})
ENUM_CANDIDATE_TYPES = frozenset({"CHAR", "VARCHAR"})
DECLARED_ENUM_TYPES = frozenset({"ENUM", "SET"})

_UNSIGNED_SUFFIX = " UNSIGNED"
_ORACLE_TIMESTAMP = "TIMESTAMP"

# addslashes(): backslash first so inserted escapes are not doubled again
_LITERAL_ESCAPES = (("\\", "\\\\"), ("'", "\\'"), ('"', '\\"'), ("\0", "\\0"))


def quote_identifier(name: str, target: Any) -> str:
    """Quote an identifier for the target dialect (backticks for MySQL, double quotes for Oracle)."""
    quote = "`" if parse_target(target) is Dialect.MYSQL else '"'
    return quote + str(name).replace(quote, quote * 2) + quote


def quote_literal(value: str) -> str:
    """Single-quote a value for an ENUM/SET literal list."""
    for raw, escaped in _LITERAL_ESCAPES:
        value = value.replace(raw, escaped)
    return f"'{value}'"


def split_unsigned(type_name: str) -> Tuple[str, bool]:
    """'INT UNSIGNED' -> ('INT', True); 'INT' -> ('INT', False)."""
    if type_name.endswith(_UNSIGNED_SUFFIX):
        return type_name[: -len(_UNSIGNED_SUFFIX)], True
    return type_name, False


def is_enum_candidate(column: ColumnMetadata, base_type: str) -> bool:
    return (
        base_type in ENUM_CANDIDATE_TYPES
        and column.length < ENUM_MAX_LENGTH
        and column.distinct_value_count <= ENUM_MAX_DISTINCT_VALUES
    )


def normalize_enum_values(values: Iterable[str]) -> List[str]:
    """Drop case-insensitive duplicates (first spelling wins) and sort case-insensitively."""
    seen = set()
    unique = []
    for value in values:
        folded = value.lower()
        if folded in seen:
            continue
        seen.add(folded)
        unique.append(value)
    return sorted(unique, key=str.lower)


def parse_declared_values(declaration: str) -> List[str]:
    """Values of a declared type such as "enum('a','b')" or "set('x','y')"."""
    start = declaration.find("('")
    end = declaration.rfind("')")
    if start < 0 or end <= start:
        return []
    body = declaration[start + 2 : end]
    return [value.replace("''", "'") for value in body.split("','")]


def _nullability(column: ColumnMetadata) -> str:
    return " NULL" if column.is_nullable else " NOT NULL"


def render_mysql_column(
    column: ColumnMetadata,
    mysql_type: str,
    enum_values: Optional[Sequence[str]] = None,
) -> str:
    """Render `name` TYPE[(...)][ UNSIGNED] [NOT ]NULL for the MySQL target.

    When enum_values is non-empty the column renders as ENUM (or as the
    declared ENUM/SET type) of those literals instead of its generic type.
    """
    base_type, unsigned = split_unsigned(mysql_type)
    clause = quote_identifier(column.name.lower(), Dialect.MYSQL) + " "

    if enum_values:
        keyword = base_type if base_type in DECLARED_ENUM_TYPES else "ENUM"
        literals = ", ".join(quote_literal(value) for value in enum_values)
        return f"{clause}{keyword}({literals}){_nullability(column)}"

    clause += base_type
    if base_type in FRACTIONAL_SECONDS_TYPES:
        clause += f"({int(column.scale or 0)})"
    elif column.scale and base_type != "DATE":
        precision = column.precision or MYSQL_MAX_DECIMAL_PRECISION
        clause += f"({precision},{column.scale})"
    elif column.precision and base_type not in INTEGER_TYPES:
        clause += f"({column.precision})"
    elif column.length > 0 and base_type not in INTEGER_TYPES:
        clause += f"({column.length})"

    if unsigned:
        clause += _UNSIGNED_SUFFIX
    return clause + _nullability(column)


def render_oracle_column(column: ColumnMetadata, oracle_type: str) -> str:
    """Render "name" TYPE[(...)] [NOT ]NULL for the Oracle target."""
    clause = quote_identifier(column.name.lower(), Dialect.ORACLE) + " "
    if oracle_type.startswith(_ORACLE_TIMESTAMP):
        # fractional seconds precede WITH [LOCAL] TIME ZONE
        if column.scale:
            oracle_type = f"{_ORACLE_TIMESTAMP}({column.scale})" + oracle_type[len(_ORACLE_TIMESTAMP):]
        return clause + oracle_type + _nullability(column)
    clause += oracle_type
    if column.scale and oracle_type != "DATE":
        if column.precision:
            clause += f"({column.precision},{column.scale})"
        else:
            clause += f"({column.scale})"
    elif column.precision:
        clause += f"({column.precision})"
    elif column.length > 0:
        clause += f"({column.length})"
    return clause + _nullability(column)


def column_definition(
    mapper: "TypeMapper",
    column: ColumnMetadata,
    target: Any,
    target_type: Optional[str] = None,
) -> str:
    """Resolve the column's target type (unless given) and render its clause.

    For the MySQL target this also runs the enum probes: the declared domain
    of ENUM/SET columns, or the current values of short, low-cardinality
    character columns.
    """
    target = parse_target(target)
    if target_type is None:
        target_type = mapper.target_type(column, target)
    if target is Dialect.ORACLE:
        return render_oracle_column(column, target_type)

    base_type, _ = split_unsigned(target_type)
    enum_values = None
    if base_type in DECLARED_ENUM_TYPES:
        enum_values = normalize_enum_values(mapper.fetch_declared_values(column))
    elif is_enum_candidate(column, base_type):
        enum_values = normalize_enum_values(mapper.fetch_distinct_values(column))
        if enum_values:
            logger.debug(f"Rendering {column.table}.{column.name} as ENUM of {len(enum_values)} values")
    return render_mysql_column(column, target_type, enum_values)
