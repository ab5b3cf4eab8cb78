from maelmon.db.database import get_session, init_db, session_scope
from maelmon.db.operations import (
    add_or_restock_definition,
    create_definition,
    create_instance,
    create_user,
    credit_currency,
    definition_to_model,
    find_definition,
    get_user,
    increment_supply,
    instance_to_model,
    list_definitions,
    list_eligible_definitions,
    list_user_instances,
    restock_definition,
    stamp_pack_claimed,
    sync_user_profile,
    user_to_model,
)

__all__ = [
    "add_or_restock_definition",
    "create_definition",
    "create_instance",
    "create_user",
    "credit_currency",
    "definition_to_model",
    "find_definition",
    "get_session",
    "get_user",
    "increment_supply",
    "init_db",
    "instance_to_model",
    "list_definitions",
    "list_eligible_definitions",
    "list_user_instances",
    "restock_definition",
    "session_scope",
    "stamp_pack_claimed",
    "sync_user_profile",
    "user_to_model",
]
