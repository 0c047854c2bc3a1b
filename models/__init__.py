from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import event
from sqlalchemy.engine import Engine
import sqlite3

db = SQLAlchemy()


# SQLite only honours ON DELETE CASCADE with foreign keys switched on
@event.listens_for(Engine, 'connect')
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute('PRAGMA foreign_keys=ON')
        cursor.close()


from .user import User
from .dealership import Dealership
from .customer import Customer
from .vehicle import Vehicle, VerificationChecklist
from .dispute import Dispute
