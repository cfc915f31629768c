from sqlalchemy import event

from lendify.extensions import db


def _install_sqlite_locking(engine):
    # pysqlite starts transactions lazily and only before DML, so two units of
    # work could both read the same stock before either writes. Emitting our own
    # BEGIN IMMEDIATE takes the database write lock up front, which is the
    # closest SQLite has to SELECT ... FOR UPDATE.
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


def configure_store(app):
    """
    Dialect specific store setup. Must run right after db.init_app.

    On SQLite every transaction starts with BEGIN IMMEDIATE, read-only ones
    included (listings, attribute refreshes after a commit), so any open
    session holds the database write lock until it commits, rolls back or is
    removed at app context teardown. Fine for dev and tests; production runs
    on MySQL with row locks.
    """
    with app.app_context():
        engine = db.engine
        if engine.dialect.name == "sqlite":
            _install_sqlite_locking(engine)
            app.logger.info("[db_setup] sqlite: units of work use BEGIN IMMEDIATE")
        else:
            app.logger.info(f"[db_setup] {engine.dialect.name}: row locks via SELECT ... FOR UPDATE")
