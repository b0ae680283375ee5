import sqlite3

import pytest

from pogpool.pool import MAX_CONNECTIONS, ConnectionPool, PoolError, run_sql_file


class FakeConnection:
    def __init__(self, conninfo):
        self.conninfo = conninfo
        self.closed = False

    def close(self):
        self.closed = True


class Recorder:
    def __init__(self, fail_after=None):
        self.made = []
        self.fail_after = fail_after

    def __call__(self, conninfo):
        if self.fail_after is not None and len(self.made) >= self.fail_after:
            raise RuntimeError("refused")
        conn = FakeConnection(conninfo)
        self.made.append(conn)
        return conn


def test_pool_opens_default_number_of_connections():
    recorder = Recorder()
    pool = ConnectionPool(recorder, "dbname=test")
    assert len(pool) == MAX_CONNECTIONS
    assert len(recorder.made) == MAX_CONNECTIONS
    assert all(conn.conninfo == "dbname=test" for conn in recorder.made)


def test_borrow_is_last_in_first_out():
    recorder = Recorder()
    pool = ConnectionPool(recorder, "x", 3)
    assert pool.borrow() is recorder.made[2]
    assert pool.borrow() is recorder.made[1]
    assert len(pool) == 1


def test_borrow_from_empty_pool_raises():
    pool = ConnectionPool(Recorder(), "x", 1)
    pool.borrow()
    with pytest.raises(PoolError):
        pool.borrow()


def test_release_returns_connection():
    pool = ConnectionPool(Recorder(), "x", 2)
    conn = pool.borrow()
    pool.release(conn)
    assert len(pool) == 2
    assert pool.borrow() is conn


def test_release_to_full_pool_raises():
    pool = ConnectionPool(Recorder(), "x", 2)
    with pytest.raises(PoolError):
        pool.release(FakeConnection("extra"))
    assert len(pool) == 2


def test_close_closes_only_pooled_connections():
    recorder = Recorder()
    pool = ConnectionPool(recorder, "x", 3)
    borrowed = pool.borrow()
    pool.close()
    assert len(pool) == 0
    assert not borrowed.closed
    assert [conn.closed for conn in recorder.made[:2]] == [True, True]


def test_context_manager_closes_pool():
    recorder = Recorder()
    with ConnectionPool(recorder, "x", 2) as pool:
        assert len(pool) == 2
    assert all(conn.closed for conn in recorder.made)


def test_failed_connect_raises_and_closes_opened():
    recorder = Recorder(fail_after=2)
    with pytest.raises(PoolError):
        ConnectionPool(recorder, "x", 4)
    assert len(recorder.made) == 2
    assert all(conn.closed for conn in recorder.made)


def test_invalid_size_rejected():
    with pytest.raises(ValueError):
        ConnectionPool(Recorder(), "x", 0)


def test_run_sql_file_executes(tmp_path):
    sql_path = tmp_path / "ExampleTable.sql"
    sql_path.write_text("CREATE TABLE ExampleTable (id TEXT PRIMARY KEY, int_col INTEGER)")
    with ConnectionPool(sqlite3.connect, ":memory:", 1) as pool:
        conn = pool.borrow()
        run_sql_file(conn, sql_path)
        names = [row[0] for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")]
        assert names == ["ExampleTable"]
        conn.close()


def test_run_sql_file_bad_sql_raises(tmp_path):
    sql_path = tmp_path / "bad.sql"
    sql_path.write_text("NOT VALID SQL AT ALL")
    conn = sqlite3.connect(":memory:")
    with pytest.raises(PoolError):
        run_sql_file(conn, sql_path)
    conn.close()


def test_run_sql_file_missing_file(tmp_path):
    conn = sqlite3.connect(":memory:")
    with pytest.raises(FileNotFoundError):
        run_sql_file(conn, tmp_path / "missing.sql")
    conn.close()