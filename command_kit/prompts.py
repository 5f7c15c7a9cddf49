# prompts.py
from __future__ import annotations

from typing import Sequence

TREE_TEXT = "{{ tree_text }}"
USER_COMMAND = "{{ user_command }}"
PREVIOUS_ACTIONS = "{{ previous_actions }}"
PREVIOUS_ACTIONS_CUTOFF = "{{ previous_actions_cutoff }}"

PROMPT_TEMPLATE = """You are an assistant that operates user interfaces on behalf of people who cannot see or touch them, following their spoken commands.

The following is a nested representation of the relevant elements of the interface. All provided elements can be interacted with, and may be referenced by their unique ID numbers provided in square brackets.

```text
{{ tree_text }}
```

Using this, break the following command, which was transcribed from the user's speech, into stages. Each stage should be on a new line, and must be one of the following stages:

- "CLICK <element-id>" --- clicks on the element with the given ID
- "FILL <element-id> 'Text to fill'" --- types the given text into the element with the given ID (you don't need to click on an element first to fill it, this will be done automatically)
- "WAIT <brief description of what's been done so far; e.g. Clicked the new email button>" --- waits for the interface to change so you can keep going
- "FINISH <brief description, as in WAIT>" --- completes the command (use last)

In your response, first write your thought process about what to do, step-by-step, and then write the stages and their parameters in a Markdown code fence with type `text`. Do NOT use comments in this code fence, only descriptions where the stages take them. Be sure to finish with the FINISH stage at the end of your list of actions.

Make sure you use valid element IDs wherever you can, and only use placeholders *after* a WAIT stage!

User's command:

```text
{{ user_command }}
```
{{ previous_actions_cutoff }}
You have already performed the following stages for this command, and the interface above reflects their result. Continue from here, do not repeat them:

{{ previous_actions }}
"""


def render_prompt(
    template: str,
    *,
    tree_text: str,
    user_command: str,
    previous_actions: Sequence[str],
) -> str:
    """Fill in ``template``; with no previous actions it is cut at the cutoff marker."""
    prompt = (
        template
        .replace(TREE_TEXT, tree_text)
        .replace(USER_COMMAND, user_command)
        .replace(PREVIOUS_ACTIONS, "- " + "\n- ".join(previous_actions) if previous_actions else "")
    )
    if not previous_actions:
        return prompt.split(PREVIOUS_ACTIONS_CUTOFF, 1)[0].strip()
    return prompt.replace(PREVIOUS_ACTIONS_CUTOFF, "")
