from common import llm
from common.ids import generate_id
from common.jsonio import atomic_write_json, load_json, remove_json

__all__ = ["llm", "generate_id", "load_json", "atomic_write_json", "remove_json"]
