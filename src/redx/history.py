from typing import Any, Dict, Iterable, List, Optional, Tuple

from redx.sessions.schema import Role

API_ROLES = {
    Role.USER: "user",
    Role.MODEL: "assistant",
}


class MessageHistory:
    def __init__(self, pairs: Optional[Iterable[Tuple[Role, str]]] = None):
        self.messages: List[Dict[str, Any]] = []
        self.system_prompt: Optional[str] = None
        for role, text in pairs or []:
            self.add_message(role, text)

    def set_system_prompt(self, prompt: str):
        self.system_prompt = prompt

    def add_message(self, role: Role, content: str):
        self.messages.append({"role": API_ROLES[Role(role)], "content": content})

    def get_messages_for_api(self, latest: Optional[str] = None) -> List[Dict[str, Any]]:
        msgs: List[Dict[str, Any]] = []
        if self.system_prompt:
            msgs.append({"role": "system", "content": self.system_prompt})
        msgs.extend(self.messages)

        if latest is not None:
            msgs.append({"role": "user", "content": latest})

        return msgs
