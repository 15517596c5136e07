from redx.config import ConfigError, parse_mode
from redx.prompts import DELETE_CONFIRMATION, Prompts
from redx.protocol.schema import other_answer
from redx.runtime.render import render_session_line, render_transcript
from redx.sessions.store import SessionStoreError


class BuiltinCommands:
    def __init__(self, runtime, input_fn=input):
        self.runtime = runtime
        self.input_fn = input_fn
        self._handlers = {
            "quit": self.cmd_quit,
            "exit": self.cmd_quit,
            "new": self.cmd_new,
            "sessions": self.cmd_sessions,
            "select": self.cmd_select,
            "rename": self.cmd_rename,
            "delete": self.cmd_delete,
            "mode": self.cmd_mode,
            "redo": self.cmd_redo,
            "form": self.cmd_form,
            "show": self.cmd_show,
            "suggest": self.cmd_suggest,
            "help": self.cmd_help,
        }

    def list_commands(self) -> list[str]:
        return sorted(self._handlers.keys())

    def has_command(self, name: str) -> bool:
        return name in self._handlers

    def handle(self, name: str, args: str) -> bool:
        handler = self._handlers.get(name)
        if not handler:
            return True
        return handler(args)

    def _confirm(self, question: str) -> bool:
        response = self.input_fn(f"{question} [y/N] ").strip().lower()
        return response in {"y", "yes"}

    def _resolve_session_id(self, prefix: str) -> str | None:
        matches = [s.id for s in self.runtime.store.sessions if s.id.startswith(prefix)]
        if len(matches) == 1:
            return matches[0]
        if not matches:
            print(f"❌ Session {prefix} not found")
        else:
            print(f"❌ Session prefix {prefix} is ambiguous")
        return None

    def cmd_quit(self, args: str) -> bool:
        print("👋 Goodbye!")
        return False

    def cmd_new(self, args: str) -> bool:
        session_id = self.runtime.new_chat()
        if session_id:
            print(f"✅ Started new chat {session_id[:8]}")
        return True

    def cmd_sessions(self, args: str) -> bool:
        sessions = self.runtime.store.sessions
        if not sessions:
            print("No saved sessions")
            return True
        print("Sessions:")
        active_id = self.runtime.store.active_session_id
        for session in sessions:
            print(render_session_line(session, session.id == active_id))
        return True

    def cmd_select(self, args: str) -> bool:
        if not args:
            print("Usage: /select <id>")
            return True
        session_id = self._resolve_session_id(args.strip())
        if session_id and self.runtime.select_session(session_id):
            print(f"✅ Switched to {session_id[:8]}")
        return True

    def cmd_rename(self, args: str) -> bool:
        title = args.strip()
        if not title:
            print("Usage: /rename <title>")
            return True
        if self.runtime.rename_session(title):
            print(f"✅ Renamed to: {title}")
        else:
            print("❌ No active chat")
        return True

    def cmd_delete(self, args: str) -> bool:
        session_id = None
        if args.strip():
            session_id = self._resolve_session_id(args.strip())
            if not session_id:
                return True
        elif self.runtime.store.active_session_id is None:
            print("❌ No active chat")
            return True

        try:
            deleted = self.runtime.delete_session(
                session_id, confirm=lambda: self._confirm(DELETE_CONFIRMATION)
            )
        except SessionStoreError as e:
            print(f"❌ {e}")
            return True
        print("✅ Chat deleted" if deleted else "⚠️  Skipped: delete")
        return True

    def cmd_mode(self, args: str) -> bool:
        if not args:
            print(f"Current mode: {self.runtime.mode.value}")
            return True
        try:
            self.runtime.set_mode(parse_mode(args))
        except ConfigError as e:
            print(f"❌ {e}")
            return True
        print(f"✅ Mode set to: {self.runtime.mode.value}")
        return True

    def cmd_redo(self, args: str) -> bool:
        if self.runtime.regenerate() is None:
            print("❌ Nothing to regenerate")
        return True

    def cmd_form(self, args: str) -> bool:
        structure = self.runtime.last_structure()
        if structure is None:
            print("No interactive form to answer")
            return True

        print(f"📋 {structure.title}")
        selections: dict[str, str] = {}
        for category in structure.categories:
            print(f"\n{category.name}")
            for index, option in enumerate(category.options, start=1):
                print(f"  {index}. {option}")
            if category.allow_other:
                print("  0. Other...")
            choice = self.input_fn("Choice (blank to skip): ").strip()
            if not choice:
                continue
            if choice == "0" and category.allow_other:
                text = self.input_fn("Your answer: ").strip()
                if text:
                    selections[category.id] = other_answer(text)
                continue
            if choice.isdigit() and 1 <= int(choice) <= len(category.options):
                selections[category.id] = category.options[int(choice) - 1]
            else:
                print(f"⚠️  Ignored invalid choice: {choice}")

        if self.runtime.submit_form(structure, selections) is None:
            print("⚠️  Nothing selected")
        return True

    def cmd_show(self, args: str) -> bool:
        session = self.runtime.active_session
        if session is None or not session.messages:
            print("No messages yet")
            return True
        print(render_transcript(self.runtime, session))
        return True

    def cmd_suggest(self, args: str) -> bool:
        print("Try one of these:")
        for title, text in Prompts.suggestions:
            print(f"  • {title}: {text}")
        return True

    def cmd_help(self, args: str) -> bool:
        print("\nCommands:")
        for name in self.list_commands():
            print(f"  /{name}")
        print()
        return True
