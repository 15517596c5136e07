from redx.runtime.builtins import BuiltinCommands
from redx.runtime.router import InputRouter


class RedXREPL:
    def __init__(self, runtime, input_fn=input):
        self.runtime = runtime
        self.input_fn = input_fn
        self.builtins = BuiltinCommands(runtime, input_fn=input_fn)
        self.router = InputRouter(self.builtins)

    def run(self, initial_message: str | None = None):
        print(f"🤖 RedX started (mode: {self.runtime.mode.value})")
        print("Commands: /help for all commands")
        print()

        if initial_message:
            self.runtime.send(initial_message)

        while True:
            try:
                user_input = self.input_fn("\n> ").strip()

                if not user_input:
                    continue

                route = self.router.route(user_input)
                if route.kind == "builtin":
                    if not self.builtins.handle(route.name, route.args):
                        break
                    continue
                if route.kind == "unknown":
                    print(
                        f"Unknown command: /{route.name}. Type /help for available commands."
                    )
                    continue

                self.runtime.send(route.args)

            except KeyboardInterrupt:
                print("\n\n⚠️  Interrupted")
                break
            except EOFError:
                break
            except Exception as e:
                print(f"\n❌ Error: {e}")
                import traceback

                traceback.print_exc()
