from pathlib import Path

from src.attendance_tracker.attendance_tracker.database.bootstrap import UNIQUE_INDEXES, iter_sql_statements


def test_splits_on_semicolons_outside_quotes():
    sql = "CREATE TABLE a (x INT);\nINSERT INTO a VALUES ('semi;colon');\n  \nINSERT INTO a VALUES (\"it's\")"

    assert list(iter_sql_statements(sql)) == [
        "CREATE TABLE a (x INT)",
        "INSERT INTO a VALUES ('semi;colon')",
        "INSERT INTO a VALUES (\"it's\")",
    ]


def test_escaped_quote_does_not_end_string():
    sql = r"INSERT INTO a VALUES ('O\'Brien; Jr');SELECT 1;"

    assert list(iter_sql_statements(sql)) == [r"INSERT INTO a VALUES ('O\'Brien; Jr')", "SELECT 1"]


def test_maintained_unique_indexes_are_declared_in_schema():
    schema = (Path(__file__).resolve().parents[2] / "database" / "schema.sql").read_text(encoding="utf-8")

    for table, name, columns in UNIQUE_INDEXES:
        assert f"UNIQUE KEY {name} ({', '.join(columns)})" in schema
    assert {t for t, _, _ in UNIQUE_INDEXES} == {"accounts", "enrollments", "attendance_events"}
    assert "device_id VARCHAR(128) PRIMARY KEY" in schema
