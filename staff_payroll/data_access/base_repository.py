# staff_payroll/data_access/base_repository.py

from typing import Generic, TypeVar, Type, List, Optional, Dict, Any, TYPE_CHECKING, Union
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from dataclasses import fields, MISSING
import logging

from staff_payroll.data_access.database_manager import DatabaseManager
from staff_payroll.constants import DB_GENERATED
from staff_payroll.exceptions import PersistenceError

if TYPE_CHECKING:
    from staff_payroll.business_logic.entities.base_entity import BaseEntity

logger = logging.getLogger(__name__)

T = TypeVar('T', bound='BaseEntity')

def _unwrap_optional(field_type: Any) -> Any:
    """Optional[X] -> X; any other annotation is returned unchanged."""
    if getattr(field_type, '__origin__', None) is Union:
        inner = [arg for arg in field_type.__args__ if arg is not type(None)]
        if inner:
            return inner[0]
    return field_type

def _is_optional(field_type: Any) -> bool:
    return getattr(field_type, '__origin__', None) is Union and type(None) in field_type.__args__

def to_db_value(value: Any) -> Any:
    """Python value -> SQLite storage value."""
    if isinstance(value, Decimal): return float(value)
    if isinstance(value, Enum): return value.value
    if isinstance(value, bool): return int(value)
    if isinstance(value, (datetime, date)): return value.isoformat()
    return value

def from_db_value(field_type: Any, raw: Any) -> Any:
    """SQLite storage value -> the declared field type (Decimal, Enum, date, datetime, bool)."""
    target = _unwrap_optional(field_type)
    if isinstance(target, type) and issubclass(target, Enum):
        return target(raw)
    if target is Decimal:
        # str() first so 0.1 stored as REAL comes back as Decimal("0.1")
        return Decimal(str(raw))
    if target is datetime and isinstance(raw, str):
        return datetime.fromisoformat(raw)
    if target is date and isinstance(raw, str):
        return date.fromisoformat(raw.split(" ")[0])
    if target is bool and isinstance(raw, int):
        return bool(raw)
    return raw

class BaseRepository(Generic[T]):
    """
    Generic CRUD over one table whose columns mirror the init fields of a dataclass.

    Writes return the boolean / absent-result contract: add() gives None and
    update()/delete() give False when the store refuses the statement.
    Reads let PersistenceError propagate.
    """
    # Column refreshed with CURRENT_TIMESTAMP on every update, if the table has one.
    touch_column: Optional[str] = None

    def __init__(self, db_manager: DatabaseManager, model_type: Type[T], table_name: str):
        self.db_manager = db_manager
        self.model_type = model_type
        self._table_name = table_name
        self._fields = [f for f in fields(model_type) if f.init]
        self._writable_columns = [f.name for f in self._fields
                                  if f.name != 'id' and not f.metadata.get(DB_GENERATED)]
        logger.debug(f"{type(self).__name__} on '{table_name}', writable columns: {self._writable_columns}")

    @property
    def table_name(self) -> str:
        return self._table_name

    def get_by_id(self, entity_id: int) -> Optional[T]:
        row = self.db_manager.fetch_one(f"SELECT * FROM {self._table_name} WHERE id = ?", (entity_id,))
        return self._entity_from_row(row) if row else None

    def get_all(self, order_by: Optional[str] = "id") -> List[T]:
        query = f"SELECT * FROM {self._table_name}"
        if order_by:
            query += f" ORDER BY {order_by}"
        return self._fetch_entities(query)

    def _fetch_entities(self, query: str, params: Optional[tuple] = None) -> List[T]:
        return [self._entity_from_row(row) for row in self.db_manager.fetch_all(query, params)]

    def _column_values(self, entity: T) -> Dict[str, Any]:
        """Storage values of the writable columns; id and database-generated columns are left out."""
        return {col: to_db_value(getattr(entity, col, None)) for col in self._writable_columns}

    def add(self, entity: T) -> Optional[T]:
        values = self._column_values(entity)
        columns = ', '.join(values)
        placeholders = ', '.join('?' for _ in values)
        query = f"INSERT INTO {self._table_name} ({columns}) VALUES ({placeholders})"
        logger.debug(f"{self._table_name}.add: {query} {tuple(values.values())}")

        try:
            cursor = self.db_manager.execute_query(query, tuple(values.values()))
        except PersistenceError as e:
            logger.error(f"Insert into {self._table_name} refused: {e}", exc_info=True)
            return None

        if cursor.lastrowid is None:
            logger.warning(f"Insert into {self._table_name} returned no row id.")
            return None

        # Re-read so database-generated columns are populated on the returned entity.
        # The row is already committed, so a failed re-read still counts as a successful insert.
        try:
            created = self.get_by_id(cursor.lastrowid)
        except PersistenceError as e:
            logger.warning(f"Inserted {self._table_name} ID {cursor.lastrowid} but could not re-read it: {e}")
            created = None
        if created is None:
            entity.id = cursor.lastrowid
            return entity
        return created

    def update(self, entity: T) -> bool:
        entity_id = getattr(entity, 'id', None)
        if entity_id is None:
            logger.error(f"Cannot update {type(entity).__name__} without an id.")
            return False

        values = self._column_values(entity)
        assignments = [f"{col} = ?" for col in values]
        if self.touch_column:
            assignments.append(f"{self.touch_column} = CURRENT_TIMESTAMP")
        query = f"UPDATE {self._table_name} SET {', '.join(assignments)} WHERE id = ?"
        logger.debug(f"{self._table_name}.update: {query} id={entity_id}")

        try:
            cursor = self.db_manager.execute_query(query, tuple(values.values()) + (entity_id,))
        except PersistenceError as e:
            logger.error(f"Update of {self._table_name} ID {entity_id} refused: {e}", exc_info=True)
            return False

        if cursor.rowcount == 0:
            logger.warning(f"No row with ID {entity_id} in {self._table_name} to update.")
            return False
        logger.info(f"{self._table_name} ID {entity_id} updated.")
        return True

    def delete(self, entity_id: int) -> bool:
        try:
            cursor = self.db_manager.execute_query(f"DELETE FROM {self._table_name} WHERE id = ?", (entity_id,))
        except PersistenceError as e:
            logger.error(f"Delete of {self._table_name} ID {entity_id} refused: {e}", exc_info=True)
            return False

        if cursor.rowcount == 0:
            logger.warning(f"No row with ID {entity_id} in {self._table_name} to delete.")
            return False
        logger.info(f"{self._table_name} ID {entity_id} deleted.")
        return True

    def find_by_criteria(self, criteria: Dict[str, Any], order_by: Optional[str] = "id") -> List[T]:
        """
        Finds entities matching all criteria. A value may be an (operator, value)
        tuple, e.g. ('>=', some_date) or ('BETWEEN', (low, high)).
        """
        if not criteria:
            return self.get_all(order_by=order_by)

        conditions = []
        params: List[Any] = []
        for column, value in criteria.items():
            operator = '='
            if isinstance(value, tuple) and len(value) == 2:
                operator, value = value
            if str(operator).upper() == 'BETWEEN':
                low, high = value
                conditions.append(f"{column} BETWEEN ? AND ?")
                params.extend((to_db_value(low), to_db_value(high)))
            else:
                conditions.append(f"{column} {operator} ?")
                params.append(to_db_value(value))

        query = f"SELECT * FROM {self._table_name} WHERE " + " AND ".join(conditions)
        if order_by:
            query += f" ORDER BY {order_by}"
        logger.debug(f"{self._table_name}.find_by_criteria: {query} {tuple(params)}")
        return self._fetch_entities(query, tuple(params))

    def _entity_from_row(self, row) -> T:
        """Builds a dataclass instance from a sqlite3.Row."""
        available = row.keys()
        entity_data = {}
        for f in self._fields:
            raw = row[f.name] if f.name in available else None
            if raw is None:
                if f.default is MISSING and f.default_factory is MISSING:
                    if not _is_optional(f.type):
                        raise PersistenceError(
                            f"Required column '{f.name}' is NULL in {self._table_name} row id={row['id']}."
                        )
                    entity_data[f.name] = None
                continue
            try:
                entity_data[f.name] = from_db_value(f.type, raw)
            except (ValueError, TypeError, InvalidOperation) as e:
                if not _is_optional(f.type):
                    logger.error(f"Could not convert required {self._table_name}.{f.name}={raw!r}: {e}")
                    raise PersistenceError(
                        f"Unreadable value for required column '{f.name}' in {self._table_name} row id={row['id']}."
                    ) from e
                logger.warning(f"Could not convert {self._table_name}.{f.name}={raw!r}: {e}. Using None.")
                entity_data[f.name] = None

        try:
            return self.model_type(**entity_data)
        except TypeError as e:
            raise PersistenceError(f"Could not build {self.model_type.__name__} from row: {e}") from e
