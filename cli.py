from typing_extensions import *

from cyk import is_derived, render_table, table_to_graphviz
from grammar import Grammar
from io_utils import load_from_file


def main():
    """Simple interactive terminal for building CNF grammars and running CYK."""
    grammars: Dict[str, Grammar] = {}

    print("CYK Grammar Terminal - Type 'help' for commands\n")

    while True:
        try:
            command = input("> ").strip()
            if not command:
                continue

            parts = command.split()
            cmd = parts[0].lower()

            # Exit
            if cmd in ["exit", "quit"]:
                break

            # Help
            elif cmd == "help":
                print(
                    """
Commands:
  LOADING:
    load <file>                  - Load grammars from file
    list                         - List all loaded grammars

  BUILDING:
    new <name>                   - Create an empty grammar
    nt <name> <X>                - Add non-terminal X
    t <name> <a>                 - Add terminal a
    start <name> <X>             - Set start symbol
    prod <name> <X> <body>       - Add production X -> body (a or BC)
    reset <name>                 - Remove every symbol and production

  INSPECTION:
    show_grammar <name>          - Show grammar info
    productions <name> <X>       - Show productions of X (X::=...)
    grammar <name>               - Show all productions

  CYK:
    cyk <name> <word>            - Membership test
    table <name> <word>          - Print the CYK table
    graph <name> <word>          - Visualize the CYK table

  GENERAL:
    delete <name>                - Delete grammar
    clear                        - Clear all
    exit                         - Exit
"""
                )

            # Load
            elif cmd == "load":
                if len(parts) < 2:
                    print("Usage: load <filename>")
                    continue
                try:
                    loaded = load_from_file(parts[1])
                    grammars.update(loaded)
                    if loaded:
                        print(f"Loaded {len(loaded)} grammars: {', '.join(loaded.keys())}")
                    else:
                        print("No items loaded")
                except OSError as e:
                    print(f"Error: {e}")

            # List
            elif cmd == "list":
                if grammars:
                    print("Grammars:")
                    for name, gram in sorted(grammars.items()):
                        print(
                            f"  {name}: {len(gram.nonterminals)} non-terminals, "
                            f"{sum(len(b) for b in gram.productions.values())} productions"
                        )
                else:
                    print("Nothing loaded")

            # New grammar
            elif cmd == "new":
                if len(parts) < 2:
                    print("Usage: new <name>")
                else:
                    grammars[parts[1]] = Grammar()
                    print(f"Created: {parts[1]}")

            # Building commands share the "<name> <symbol>" shape
            elif cmd in ["nt", "t", "start"]:
                if len(parts) < 3:
                    print(f"Usage: {cmd} <name> <symbol>")
                elif parts[1] not in grammars:
                    print(f"Grammar not found: {parts[1]}")
                else:
                    gram = grammars[parts[1]]
                    if cmd == "nt":
                        gram.add_non_terminal(parts[2])
                    elif cmd == "t":
                        gram.add_terminal(parts[2])
                    else:
                        gram.set_start_symbol(parts[2])
                    print("OK")

            # Add production
            elif cmd == "prod":
                if len(parts) < 4:
                    print("Usage: prod <name> <X> <body>")
                elif parts[1] not in grammars:
                    print(f"Grammar not found: {parts[1]}")
                else:
                    grammars[parts[1]].add_production(parts[2], parts[3])
                    print("OK")

            # Reset grammar
            elif cmd == "reset":
                if len(parts) < 2:
                    print("Usage: reset <name>")
                elif parts[1] not in grammars:
                    print(f"Grammar not found: {parts[1]}")
                else:
                    grammars[parts[1]].remove_grammar()
                    print(f"Reset: {parts[1]}")

            # Show grammar info
            elif cmd == "show_grammar":
                if len(parts) < 2:
                    print("Usage: show_grammar <name>")
                elif parts[1] not in grammars:
                    print(f"Grammar not found: {parts[1]}")
                else:
                    print(grammars[parts[1]])

            # Productions of one non-terminal
            elif cmd == "productions":
                if len(parts) < 3:
                    print("Usage: productions <name> <X>")
                elif parts[1] not in grammars:
                    print(f"Grammar not found: {parts[1]}")
                else:
                    print(grammars[parts[1]].get_productions(parts[2]))

            # Whole grammar
            elif cmd == "grammar":
                if len(parts) < 2:
                    print("Usage: grammar <name>")
                elif parts[1] not in grammars:
                    print(f"Grammar not found: {parts[1]}")
                else:
                    print(grammars[parts[1]].get_grammar(), end="")

            # CYK membership test; a missing word means the empty word
            elif cmd == "cyk":
                if len(parts) < 2:
                    print("Usage: cyk <name> <word>")
                elif parts[1] not in grammars:
                    print(f"Grammar not found: {parts[1]}")
                else:
                    word = parts[2] if len(parts) > 2 else ""
                    result = is_derived(grammars[parts[1]], word)
                    print("ACCEPTED" if result else "REJECTED")

            # CYK table
            elif cmd == "table":
                if len(parts) < 3:
                    print("Usage: table <name> <word>")
                elif parts[1] not in grammars:
                    print(f"Grammar not found: {parts[1]}")
                else:
                    print(render_table(grammars[parts[1]], parts[2]), end="")

            # Graph CYK table
            elif cmd == "graph":
                if len(parts) < 3:
                    print("Usage: graph <name> <word>")
                elif parts[1] not in grammars:
                    print(f"Grammar not found: {parts[1]}")
                else:
                    filename = f"{parts[1]}_{parts[2]}"
                    table_to_graphviz(grammars[parts[1]], parts[2], filename=filename)
                    print(f"Created: {filename}.png")

            # Delete grammar
            elif cmd == "delete":
                if len(parts) < 2:
                    print("Usage: delete <name>")
                elif parts[1] in grammars:
                    del grammars[parts[1]]
                    print(f"Deleted: {parts[1]}")
                else:
                    print(f"Not found: {parts[1]}")

            # Clear all
            elif cmd == "clear":
                grammars.clear()
                print("Cleared all")

            else:
                print(f"Unknown command: {cmd}")

        except KeyboardInterrupt:
            print("\nUse 'exit' to quit")
        except EOFError:
            break
        except Exception as e:
            print(f"Error: {e}")

    print("Goodbye!")
