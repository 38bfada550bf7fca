from src.role_hierarchy.role_hierarchy.database.bootstrap import _iter_sql_statements, _strip_create_db_and_use


def test_splits_statements_and_drops_comments():
    sql = """
    -- roles
    CREATE TABLE a (id INT);
    INSERT INTO a VALUES (1); -- trailing
    """

    assert list(_iter_sql_statements(sql)) == ["CREATE TABLE a (id INT)", "INSERT INTO a VALUES (1)"]


def test_semicolons_inside_quotes_are_kept():
    sql = "INSERT INTO roles (name) VALUES ('a;b'); INSERT INTO roles (name) VALUES (\"c;d\")"

    assert list(_iter_sql_statements(sql)) == [
        "INSERT INTO roles (name) VALUES ('a;b')",
        'INSERT INTO roles (name) VALUES ("c;d")',
    ]


def test_escaped_quote_does_not_end_string():
    sql = "INSERT INTO roles (name) VALUES ('it\\'s; fine');"

    assert list(_iter_sql_statements(sql)) == ["INSERT INTO roles (name) VALUES ('it\\'s; fine')"]


def test_strips_create_database_and_use():
    sql = "CREATE DATABASE goyalsons_db;\nUSE goyalsons_db;\nCREATE TABLE t (id INT);"

    assert list(_iter_sql_statements(_strip_create_db_and_use(sql))) == ["CREATE TABLE t (id INT)"]
