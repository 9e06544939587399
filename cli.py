import argparse
import sys
from typing_extensions import *

from automaton import Automaton, AutomatonError
from closure import compute_epsilon_closure
from converter import ConvertedAutomaton, convert
from io_utils import (
    format_closure,
    format_result,
    load_from_file,
    read_automaton_interactive,
)


HELP_TEXT = """
Commands:
  LOADING:
    load <file>                  - Load automata from file
    read [name]                  - Enter an automaton step by step
    list                         - List all loaded automata

  AUTOMATA OPERATIONS:
    show <name>                  - Show automaton info
    closure <name>               - Show the epsilon-closure of every state
    convert <name> [result]      - Remove epsilon transitions
    test <name> <word>           - Test if word is accepted
    graph <name>                 - Visualize automaton

  GENERAL:
    delete <name>                - Delete item
    clear                        - Clear all
    exit                         - Exit
"""


def repl(
    input_fn: Callable[[str], str] = input,
    automata: Optional[Dict[str, Automaton]] = None,
):
    """Simple interactive terminal for epsilon-NFA operations."""
    automata = {} if automata is None else automata
    converted: Dict[str, ConvertedAutomaton] = {}

    print("ε-NFA Terminal - Type 'help' for commands\n")

    while True:
        try:
            command = input_fn("> ").strip()
            if not command:
                continue

            parts = command.split()
            cmd = parts[0].lower()

            # Exit
            if cmd in ["exit", "quit"]:
                break

            # Help
            elif cmd == "help":
                print(HELP_TEXT)

            # Load
            elif cmd == "load":
                if len(parts) < 2:
                    print("Usage: load <filename>")
                    continue
                try:
                    loaded = load_from_file(parts[1])
                    automata.update(loaded)
                    for key in loaded:
                        converted.pop(key, None)
                    if loaded:
                        print(
                            f"Loaded {len(loaded)} automata: {', '.join(loaded.keys())}"
                        )
                    else:
                        print("No items loaded")
                except OSError as e:
                    print(f"Error: {e}")

            # Read automaton from prompts
            elif cmd == "read":
                name = parts[1] if len(parts) > 1 else f"nfa{len(automata)}"
                try:
                    automata[name] = read_automaton_interactive(input_fn)
                    converted.pop(name, None)
                    print(f"Created: {name}")
                except AutomatonError as e:
                    print(f"Error: {e}")

            # List
            elif cmd == "list":
                if automata:
                    print("Automata:")
                    for name, aut in sorted(automata.items()):
                        kind = "NFA+ε" if aut.epsilon_transitions else "NFA"
                        print(f"  {name}: {kind}, {aut.num_states} states")
                else:
                    print("Nothing loaded")

            # Delete item
            elif cmd == "delete":
                if len(parts) < 2:
                    print("Usage: delete <name>")
                elif parts[1] in automata:
                    del automata[parts[1]]
                    converted.pop(parts[1], None)
                    print(f"Deleted: {parts[1]}")
                else:
                    print(f"Not found: {parts[1]}")

            # Clear all
            elif cmd == "clear":
                automata.clear()
                converted.clear()
                print("Cleared all")

            # Show automaton info
            elif cmd == "show":
                if len(parts) < 2:
                    print("Usage: show <name>")
                elif parts[1] not in automata:
                    print(f"Automaton not found: {parts[1]}")
                elif parts[1] in converted:
                    print(format_result(converted[parts[1]]))
                else:
                    aut = automata[parts[1]]
                    print(f"\n{parts[1]}:")
                    print(f"  States: {aut.num_states}")
                    print(f"  Alphabet: {' '.join(aut.alphabet)}")
                    print(f"  Start: {aut.initial_state}")
                    print(f"  Accepting: {sorted(aut.final_states)}")
                    print(f"  Transitions: {len(aut.symbol_transitions)}")
                    print(f"  Epsilon transitions: {len(aut.epsilon_transitions)}\n")

            # Show epsilon-closures
            elif cmd == "closure":
                if len(parts) < 2:
                    print("Usage: closure <name>")
                elif parts[1] not in automata:
                    print(f"Automaton not found: {parts[1]}")
                else:
                    print(format_closure(compute_epsilon_closure(automata[parts[1]])))

            # Remove epsilon transitions
            elif cmd == "convert":
                if len(parts) < 2:
                    print("Usage: convert <name> [result]")
                elif parts[1] not in automata:
                    print(f"Automaton not found: {parts[1]}")
                else:
                    result_name = parts[2] if len(parts) > 2 else f"{parts[1]}_nfa"
                    result = convert(automata[parts[1]])
                    automata[result_name] = result.to_automaton()
                    converted[result_name] = result
                    print(format_result(result))
                    print(f"Created: {result_name}")

            # Test word on automaton
            elif cmd == "test":
                if len(parts) < 3:
                    print("Usage: test <name> <word>")
                elif parts[1] not in automata:
                    print(f"Automaton not found: {parts[1]}")
                else:
                    word = "" if parts[2] in ("eps", "ε") else parts[2]
                    result = automata[parts[1]].accepts(word)
                    print("ACCEPTED" if result else "REJECTED")

            # Graph automaton
            elif cmd == "graph":
                if len(parts) < 2:
                    print("Usage: graph <name>")
                elif parts[1] not in automata:
                    print(f"Automaton not found: {parts[1]}")
                else:
                    try:
                        target = converted.get(parts[1], automata[parts[1]])
                        target.to_graphviz(filename=parts[1], view=True)
                        print(f"Created: {parts[1]}.png")
                    except Exception as e:
                        print(f"Error: {e}")

            else:
                print(f"Unknown command: {cmd}")

        except KeyboardInterrupt:
            print("\nUse 'exit' to quit")
        except EOFError:
            break
        except AutomatonError as e:
            print(f"Error: {e}")

    print("Goodbye!")


def build_arg_parser():
    p = argparse.ArgumentParser(
        description="Remove epsilon transitions from a nondeterministic finite automaton."
    )
    p.add_argument("files", nargs="*", help="Automaton files to convert")
    p.add_argument(
        "--prompt",
        action="store_true",
        help="Read one automaton interactively instead of from files",
    )
    p.add_argument(
        "--graph", action="store_true", help="Render each result with Graphviz"
    )
    p.add_argument(
        "--no-view", action="store_true", help="Do not open rendered graphs"
    )
    return p


def main(argv=None):
    args = build_arg_parser().parse_args(argv)

    automata: Dict[str, Automaton] = {}
    try:
        if args.prompt:
            automata["input"] = read_automaton_interactive(input)
        for filename in args.files:
            automata.update(load_from_file(filename))
    except (AutomatonError, OSError, EOFError) as e:
        print(f"Error: {e}")
        return 1

    if not automata:
        if args.prompt or args.files:
            print("No items loaded")
            return 1
        repl(input)
        return 0

    for name, aut in automata.items():
        result = convert(aut)
        if len(automata) > 1:
            print(f"\n{name}:")
        print(format_result(result))
        if args.graph:
            try:
                result.to_graphviz(filename=f"{name}_nfa", view=not args.no_view)
                print(f"Created: {name}_nfa.png")
            except Exception as e:
                print(f"Error: {e}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
