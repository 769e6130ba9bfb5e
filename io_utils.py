import os
import re
from typing_extensions import *

from grammar import Grammar


def load_from_file(filename: str) -> Dict[str, Grammar]:
    grammars: Dict[str, Grammar] = {}

    with open(filename, "r", encoding="utf-8") as f:
        content = f.read()

    name_pattern = re.compile(r"^([A-Za-z]\w*):\s*$", re.MULTILINE)

    if name_pattern.search(content):
        # Named sections: NAME:\n...definition...
        sections = name_pattern.split(content)

        for i in range(1, len(sections), 2):
            if i + 1 >= len(sections):
                continue

            name = sections[i].strip()
            definition = sections[i + 1].strip()

            if not definition:
                continue

            try:
                grammars[name] = Grammar.from_string(definition)
            except ValueError as e:
                print(f"Warning: Failed to load grammar '{name}': {e}")
    else:
        # Single unnamed grammar
        base_name = os.path.basename(filename).rsplit(".", 1)[0]

        try:
            grammars[base_name] = Grammar.from_string(content)
        except ValueError as e:
            print(f"Warning: Failed to load grammar '{base_name}': {e}")

    return grammars
