import sqlite3
from contextlib import closing
from pathlib import Path
from threading import Lock
from typing import Optional, TypeVar

from pydantic import BaseModel

from src.core.lifecycle.repository import LifecycleRepository
from src.core.models import LifecycleStage, Rule, SimulationEnvironment

_ModelT = TypeVar("_ModelT", bound=BaseModel)


class SqliteLifecycleRepository(LifecycleRepository):
    """Stores stages, rules and environments as JSON documents keyed by id.

    Listing follows insertion order; upserts keep the original row position.
    """

    def __init__(self, *, database_path: str) -> None:
        self._lock = Lock()
        self._database_path = database_path
        self._init_db()

    def list_stages(self) -> list[LifecycleStage]:
        return self._list("lifecycle_stages", LifecycleStage)

    def get_stage(self, *, stage_id: str) -> Optional[LifecycleStage]:
        return self._get("lifecycle_stages", stage_id, LifecycleStage)

    def save_stage(self, stage: LifecycleStage) -> None:
        self._upsert("lifecycle_stages", stage.id, stage)

    def delete_stage(self, *, stage_id: str) -> bool:
        return self._delete("lifecycle_stages", stage_id)

    def list_rules(self) -> list[Rule]:
        return self._list("lifecycle_rules", Rule)

    def get_rule(self, *, rule_id: str) -> Optional[Rule]:
        return self._get("lifecycle_rules", rule_id, Rule)

    def save_rule(self, rule: Rule) -> None:
        self._upsert("lifecycle_rules", rule.id, rule)

    def delete_rule(self, *, rule_id: str) -> bool:
        return self._delete("lifecycle_rules", rule_id)

    def get_environment(self, *, stage_id: str) -> Optional[SimulationEnvironment]:
        return self._get("simulation_environments", stage_id, SimulationEnvironment)

    def save_environment(self, environment: SimulationEnvironment) -> None:
        self._upsert("simulation_environments", environment.stage_id, environment)

    def clear_environments(self) -> None:
        with self._lock, closing(self._connect()) as connection:
            connection.execute("DELETE FROM simulation_environments")
            connection.commit()

    def _list(self, table: str, model: type[_ModelT]) -> list[_ModelT]:
        query = f"SELECT payload_json FROM {table} ORDER BY rowid"
        with closing(self._connect()) as connection:
            rows = connection.execute(query).fetchall()
        return [model.model_validate_json(row["payload_json"]) for row in rows]

    def _get(self, table: str, record_id: str, model: type[_ModelT]) -> Optional[_ModelT]:
        query = f"SELECT payload_json FROM {table} WHERE record_id = ?"
        with closing(self._connect()) as connection:
            row = connection.execute(query, (record_id,)).fetchone()
        if row is None:
            return None
        return model.model_validate_json(row["payload_json"])

    def _upsert(self, table: str, record_id: str, payload: BaseModel) -> None:
        query = f"""
            INSERT INTO {table} (record_id, payload_json) VALUES (?, ?)
            ON CONFLICT(record_id) DO UPDATE SET payload_json=excluded.payload_json
        """
        with self._lock, closing(self._connect()) as connection:
            connection.execute(query, (record_id, payload.model_dump_json()))
            connection.commit()

    def _delete(self, table: str, record_id: str) -> bool:
        query = f"DELETE FROM {table} WHERE record_id = ?"
        with self._lock, closing(self._connect()) as connection:
            cursor = connection.execute(query, (record_id,))
            connection.commit()
            return cursor.rowcount > 0

    def _connect(self) -> sqlite3.Connection:
        connection = sqlite3.connect(self._database_path)
        connection.row_factory = sqlite3.Row
        return connection

    def _init_db(self) -> None:
        Path(self._database_path).parent.mkdir(parents=True, exist_ok=True)
        with closing(self._connect()) as connection:
            connection.executescript(
                """
                CREATE TABLE IF NOT EXISTS lifecycle_stages (
                    record_id TEXT PRIMARY KEY,
                    payload_json TEXT NOT NULL
                );

                CREATE TABLE IF NOT EXISTS lifecycle_rules (
                    record_id TEXT PRIMARY KEY,
                    payload_json TEXT NOT NULL
                );

                CREATE TABLE IF NOT EXISTS simulation_environments (
                    record_id TEXT PRIMARY KEY,
                    payload_json TEXT NOT NULL
                );
                """
            )
            connection.commit()
