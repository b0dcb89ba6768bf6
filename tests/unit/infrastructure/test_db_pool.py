"""
Name: Database Pool Tests

Responsibilities:
  - Test pool lifecycle (init, get, close, reset)
  - Test connection instrumentation (healthcheck, timing proxy)

Notes:
  - Uses mocking for ConnectionPool
"""

from contextlib import contextmanager
from unittest.mock import MagicMock, patch

import pytest


@pytest.mark.unit
class TestPoolLifecycle:
    """Test pool initialization and cleanup."""

    def test_init_pool_wraps_connection_pool(self):
        from identity_api.infrastructure.db.instrumentation import (
            InstrumentedConnectionPool,
        )
        from identity_api.infrastructure.db.pool import init_pool, reset_pool

        reset_pool()

        with patch("identity_api.infrastructure.db.pool.ConnectionPool") as MockPool:
            result = init_pool("postgresql://test", min_size=2, max_size=10)

            MockPool.assert_called_once()
            assert MockPool.call_args.kwargs["min_size"] == 2
            assert isinstance(result, InstrumentedConnectionPool)

        reset_pool()

    def test_init_pool_twice_raises_error(self):
        from identity_api.infrastructure.db.errors import PoolAlreadyInitializedError
        from identity_api.infrastructure.db.pool import init_pool, reset_pool

        reset_pool()

        with patch("identity_api.infrastructure.db.pool.ConnectionPool"):
            init_pool("postgresql://test", min_size=1, max_size=2)

            with pytest.raises(PoolAlreadyInitializedError):
                init_pool("postgresql://test", min_size=1, max_size=2)

        reset_pool()

    def test_get_pool_without_init_raises_error(self):
        from identity_api.infrastructure.db.errors import PoolNotInitializedError
        from identity_api.infrastructure.db.pool import get_pool, reset_pool

        reset_pool()

        with pytest.raises(PoolNotInitializedError):
            get_pool()

    def test_close_pool_closes_and_clears(self):
        from identity_api.infrastructure.db.errors import PoolNotInitializedError
        from identity_api.infrastructure.db.pool import (
            close_pool,
            get_pool,
            init_pool,
            reset_pool,
        )

        reset_pool()

        with patch("identity_api.infrastructure.db.pool.ConnectionPool") as MockPool:
            mock_pool = MagicMock()
            MockPool.return_value = mock_pool
            init_pool("postgresql://test", min_size=1, max_size=2)

            close_pool()
            close_pool()  # idempotente

            mock_pool.close.assert_called_once()
            with pytest.raises(PoolNotInitializedError):
                get_pool()


@pytest.mark.unit
class TestInstrumentation:
    def _pool_with(self, conn):
        inner = MagicMock()

        @contextmanager
        def _connection():
            yield conn

        inner.connection.side_effect = _connection
        return inner

    def test_healthcheck_runs_select_1(self):
        from identity_api.infrastructure.db.instrumentation import (
            InstrumentedConnectionPool,
            TimedConnection,
        )

        conn = MagicMock()
        pool = InstrumentedConnectionPool(self._pool_with(conn), healthcheck=True)

        with pool.connection() as timed:
            assert isinstance(timed, TimedConnection)
            timed.execute("SELECT id FROM users")

        assert [c.args[0] for c in conn.execute.call_args_list] == [
            "SELECT 1",
            "SELECT id FROM users",
        ]

    def test_failed_healthcheck_is_connection_error(self):
        from identity_api.infrastructure.db.errors import DatabaseConnectionError
        from identity_api.infrastructure.db.instrumentation import (
            InstrumentedConnectionPool,
        )

        conn = MagicMock()
        conn.execute.side_effect = RuntimeError("server closed the connection")
        pool = InstrumentedConnectionPool(self._pool_with(conn), healthcheck=True)

        with pytest.raises(DatabaseConnectionError):
            with pool.connection():
                pass
