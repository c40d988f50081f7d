import pytest

from crossddl.columns import ColumnMetadata, Dialect
from crossddl.ddl import (
    column_definition,
    is_enum_candidate,
    normalize_enum_values,
    parse_declared_values,
    quote_identifier,
    quote_literal,
    render_mysql_column,
    render_oracle_column,
    split_unsigned,
)
from crossddl.mappers import get_mapper

from conftest import SCHEMA, FakeMySQLSource, FakeTable, mysql_column


def _column(name, original_type, **kwargs):
    return ColumnMetadata(SCHEMA, "t", name, original_type, **kwargs)


# ==================== Pure helpers ====================


def test_quote_identifier_per_target():
    assert quote_identifier("a`b", "mysql") == "`a``b`"
    assert quote_identifier('x"y', Dialect.ORACLE) == '"x""y"'


def test_quote_literal_escapes_like_addslashes():
    assert quote_literal("it's") == "'it\\'s'"
    assert quote_literal('say "hi"') == "'say \\\"hi\\\"'"
    assert quote_literal("a\\b") == "'a\\\\b'"


def test_split_unsigned():
    assert split_unsigned("INT UNSIGNED") == ("INT", True)
    assert split_unsigned("DECIMAL") == ("DECIMAL", False)


def test_normalize_enum_values_dedupes_case_insensitively_and_sorts():
    values = ["b", "A", "a", "B", "c"]
    assert normalize_enum_values(values) == ["A", "b", "c"]


def test_normalize_enum_values_is_idempotent():
    once = normalize_enum_values(["foo10", "Foo2", "foo1", "FOO1", "bar"])
    assert once == ["bar", "foo1", "foo10", "Foo2"]
    assert normalize_enum_values(once) == once


@pytest.mark.parametrize(
    "declaration,expected",
    [
        ("enum('abc','def')", ["abc", "def"]),
        ("set('nop','qrs')", ["nop", "qrs"]),
        ("enum('it''s','x')", ["it's", "x"]),
        ("enum('solo')", ["solo"]),
        ("int(11)", []),
        ("", []),
    ],
)
def test_parse_declared_values(declaration, expected):
    assert parse_declared_values(declaration) == expected


def test_is_enum_candidate_thresholds():
    assert is_enum_candidate(_column("c", "CHAR", length=63, distinct_value_count=16), "CHAR")
    assert not is_enum_candidate(_column("c", "CHAR", length=64, distinct_value_count=3), "CHAR")
    assert not is_enum_candidate(_column("c", "VARCHAR", length=10, distinct_value_count=17), "VARCHAR")
    assert not is_enum_candidate(_column("c", "TEXT", length=0, distinct_value_count=2), "TEXT")


# ==================== MySQL column clauses ====================


@pytest.mark.parametrize(
    "column,mysql_type,expected",
    [
        (_column("Price", "DECIMAL", length=10, precision=10, scale=2, is_nullable=False),
         "DECIMAL", "`price` DECIMAL(10,2) NOT NULL"),
        (_column("amount", "DECIMAL UNSIGNED", length=10, precision=10, scale=2, is_nullable=False),
         "DECIMAL UNSIGNED", "`amount` DECIMAL(10,2) UNSIGNED NOT NULL"),
        (_column("ratio", "NUMBER", length=22, scale=4, is_nullable=True),
         "DECIMAL", "`ratio` DECIMAL(65,4) NULL"),
        (_column("qty", "INT UNSIGNED", length=10, precision=10, scale=0, is_nullable=False),
         "INT UNSIGNED", "`qty` INT UNSIGNED NOT NULL"),
        (_column("n", "NUMBER", length=22, precision=38, scale=0, is_nullable=False),
         "SMALLINT UNSIGNED", "`n` SMALLINT UNSIGNED NOT NULL"),
        (_column("name", "VARCHAR", length=45, is_nullable=True),
         "VARCHAR", "`name` VARCHAR(45) NULL"),
        (_column("weight", "FLOAT", length=12, precision=12, is_nullable=False),
         "FLOAT", "`weight` FLOAT(12) NOT NULL"),
        (_column("created", "DATETIME", is_nullable=False),
         "DATETIME", "`created` DATETIME(0) NOT NULL"),
        (_column("updated", "TIMESTAMP", scale=6, is_nullable=False),
         "TIMESTAMP", "`updated` TIMESTAMP(6) NOT NULL"),
        (_column("at", "TIME", length=10, scale=3, is_nullable=True),
         "TIME", "`at` TIME(3) NULL"),
        (_column("born", "DATETIME2", scale=7, is_nullable=False),
         "DATE", "`born` DATE NOT NULL"),
        (_column("notes", "NVARCHAR", length=-1, is_nullable=True),
         "LONGTEXT", "`notes` LONGTEXT NULL"),
    ],
)
def test_render_mysql_column(column, mysql_type, expected):
    assert render_mysql_column(column, mysql_type) == expected


def test_render_mysql_column_with_enum_values():
    column = _column("Status", "VARCHAR", length=20, is_nullable=False)
    assert render_mysql_column(column, "VARCHAR", ["new", "it's"]) == "`status` ENUM('new', 'it\\'s') NOT NULL"


def test_render_mysql_column_keeps_declared_set_keyword():
    column = _column("tags", "SET", is_nullable=True)
    assert render_mysql_column(column, "SET", ["tuv", "wxyz"]) == "`tags` SET('tuv', 'wxyz') NULL"


# ==================== Oracle column clauses ====================


@pytest.mark.parametrize(
    "column,oracle_type,expected",
    [
        (_column("qty", "INT", length=10, precision=10, scale=0, is_nullable=False),
         "NUMBER", '"qty" NUMBER(10) NOT NULL'),
        (_column("Price", "DECIMAL", length=10, precision=10, scale=2, is_nullable=False),
         "NUMBER", '"price" NUMBER(10,2) NOT NULL'),
        (_column("created", "DATETIME", scale=6, is_nullable=False),
         "TIMESTAMP", '"created" TIMESTAMP(6) NOT NULL'),
        (_column("seen", "TIMESTAMP WITH TIME ZONE", scale=6, is_nullable=False),
         "TIMESTAMP WITH TIME ZONE", '"seen" TIMESTAMP(6) WITH TIME ZONE NOT NULL'),
        (_column("local", "TIMESTAMP WITH LOCAL TIME ZONE", scale=3, is_nullable=True),
         "TIMESTAMP WITH LOCAL TIME ZONE", '"local" TIMESTAMP(3) WITH LOCAL TIME ZONE NULL'),
        (_column("moved", "DATETIME2", precision=27, scale=7, is_nullable=False),
         "TIMESTAMP", '"moved" TIMESTAMP(7) NOT NULL'),
        (_column("name", "VARCHAR", length=45, is_nullable=True),
         "NVARCHAR", '"name" NVARCHAR(45) NULL'),
        (_column("day", "DATE", scale=0, is_nullable=False),
         "DATE", '"day" DATE NOT NULL'),
        (_column("born", "DATETIME2", scale=7, is_nullable=False),
         "DATE", '"born" DATE NOT NULL'),
        (_column("notes", "NVARCHAR", length=-1, is_nullable=True),
         "NVARCHAR", '"notes" NVARCHAR NULL'),
    ],
)
def test_render_oracle_column(column, oracle_type, expected):
    assert render_oracle_column(column, oracle_type) == expected


# ==================== Enum detection through a mapper ====================


def _definition(fake_column, target="mysql"):
    source = FakeMySQLSource(FakeTable("t", [fake_column]))
    mapper = get_mapper(source)
    column = mapper.describe_column(SCHEMA, "t", fake_column.name)
    return column_definition(mapper, column, target), source


def test_low_cardinality_char_renders_as_enum():
    values = [f"foo{i}" for i in range(1, 11)] * 2
    definition, _ = _definition(mysql_column("char", "char", values, length=34))
    assert definition == (
        "`char` ENUM('foo1', 'foo10', 'foo2', 'foo3', 'foo4', "
        "'foo5', 'foo6', 'foo7', 'foo8', 'foo9') NOT NULL"
    )


def test_enum_values_are_trimmed_and_deduplicated():
    values = ["abc ", "abc", "Foo8", "foo8", " bar"]
    definition, _ = _definition(mysql_column("code", "varchar", values, length=12))
    assert definition == "`code` ENUM('abc', 'bar', 'Foo8') NOT NULL"


def test_enum_rendering_is_deterministic():
    values = ["b", "a", "C", "c"]
    first, _ = _definition(mysql_column("code", "char", values, length=5))
    second, _ = _definition(mysql_column("code", "char", values, length=5))
    assert first == second


def test_all_null_char_falls_back_to_declared_length():
    definition, source = _definition(mysql_column("char_null", "char", [None, None], length=34, nullable=True))
    assert definition == "`char_null` CHAR(34) NULL"
    assert source.queries_matching("SELECT DISTINCT")


def test_long_char_columns_are_not_probed():
    definition, source = _definition(mysql_column("char_null", "char", ["a", "b"], length=67, nullable=True))
    assert definition == "`char_null` CHAR(67) NULL"
    assert not source.queries_matching("SELECT DISTINCT")


def test_high_cardinality_varchar_is_not_enum():
    values = [f"v{i}" for i in range(17)]
    definition, source = _definition(mysql_column("varchar", "varchar", values, length=12))
    assert definition == "`varchar` VARCHAR(12) NOT NULL"
    assert not source.queries_matching("SELECT DISTINCT")


def test_declared_enum_uses_full_domain_not_sampled_values():
    column = mysql_column("enum_null", "enum", ["klm"], nullable=True, declaration="enum('klm','hij','HIJ')")
    definition, source = _definition(column)
    assert definition == "`enum_null` ENUM('hij', 'klm') NULL"
    assert not source.queries_matching("SELECT DISTINCT")


def test_declared_set_renders_set():
    column = mysql_column("set", "set", ["nop"], declaration="set('qrs','nop')")
    definition, _ = _definition(column)
    assert definition == "`set` SET('nop', 'qrs') NOT NULL"


def test_oracle_target_never_renders_enum():
    definition, source = _definition(mysql_column("code", "char", ["a", "b"], length=34), target="oracle")
    assert definition == '"code" CHAR(34) NOT NULL'
    assert not source.queries_matching("SELECT DISTINCT")


def test_explicit_target_type_skips_resolution():
    source = FakeMySQLSource()
    mapper = get_mapper(source)
    column = _column("qty", "INT", length=10, precision=10, scale=0, is_nullable=False)
    assert column_definition(mapper, column, "mysql", "BIGINT UNSIGNED") == "`qty` BIGINT UNSIGNED NOT NULL"
    assert source.queries == []
