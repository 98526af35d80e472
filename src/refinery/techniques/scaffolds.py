"""Reasoning scaffolds layered on top of a composed normal-mode prompt.

Every scaffold checks for its own marker first, so running one twice
leaves the prompt unchanged. ``optimize_for_tokens`` is the exception:
it only removes text and must run after everything else.
"""

from __future__ import annotations

import re

from refinery.schemas.optimization import OutputFormat

# ------------------------------------------------------------------
# Markers
# ------------------------------------------------------------------

COT_MARKER = "Let me think through this step by step:"
TOT_MARKER = "Explore this problem as a tree of thoughts:"
SELF_CONSISTENCY_MARKER = "Self-consistency check:"
REACT_MARKER = "I need to approach this using reasoning and action steps:"
FEW_SHOT_MARKER = "Here are some examples of the desired format:"
OUTPUT_FORMAT_MARKER = "Output Format:"

FEW_SHOT_EXAMPLES: dict[str, list[tuple[str, str]]] = {
    "technology": [
        (
            "Write a function to sort an array",
            "```javascript\nfunction sortArray(arr) {\n  return arr.sort((a, b) => a - b);\n}\n```",
        ),
    ],
    "creative": [
        (
            "Write a short story about time travel",
            "The pocket watch ticked backwards as Sarah realized she had exactly thirty "
            "minutes to prevent the accident that would change everything...",
        ),
    ],
    "business": [
        (
            "Analyze market trends",
            "Market Analysis:\n1. Current trends\n2. Growth indicators\n3. Risk factors\n"
            "4. Recommendations",
        ),
    ],
}

_FORMAT_INSTRUCTIONS: dict[str, str] = {
    "json": "Please provide your response in valid JSON format with appropriate key-value pairs.",
    "markdown": (
        "Please format your response using proper Markdown syntax with headers, lists, "
        "and emphasis."
    ),
    "list": "Please structure your response as a numbered or bulleted list for clarity.",
    "steps": "Please break down your response into clear, sequential steps.",
}

_WHITESPACE = re.compile(r"\s+")
_POLITE_FILLER = re.compile(r"\b(please|kindly|if you could|would you mind)\b", re.IGNORECASE)
_INTENSIFIERS = re.compile(r"\b(very|really|quite|extremely)\b", re.IGNORECASE)
_SPACE_BEFORE_PUNCT = re.compile(r"\s+([,.;:!?])")


def add_chain_of_thought(prompt: str) -> str:
    if COT_MARKER in prompt:
        return prompt
    return f"""{COT_MARKER}

{prompt}

I'll approach this systematically:
1. First, I'll understand what's being asked
2. Then I'll break down the problem into components
3. I'll work through each part methodically
4. Finally, I'll synthesize a comprehensive response

Let me begin:"""


def add_tree_of_thoughts(prompt: str) -> str:
    if TOT_MARKER in prompt:
        return prompt
    return f"""{prompt}

{TOT_MARKER}
1. Generate three distinct approaches to the problem
2. For each approach, reason a few steps ahead and note its strengths and weaknesses
3. Evaluate which branches look most promising and prune the rest
4. Expand the strongest branch into a complete solution
5. Explain why the chosen path beats the alternatives"""


def add_self_consistency(prompt: str) -> str:
    if SELF_CONSISTENCY_MARKER in prompt:
        return prompt
    return f"""{prompt}

{SELF_CONSISTENCY_MARKER}
- Solve the problem independently using at least three different lines of reasoning
- Compare the answers each line of reasoning produces
- Report the answer most of them agree on, and flag any disagreement"""


def add_react(prompt: str) -> str:
    if REACT_MARKER in prompt:
        return prompt
    return f"""{REACT_MARKER}

Task: {prompt}

Thought: Let me analyze what needs to be done here.
Action: I'll break this down into logical steps.
Observation: [I'll note what I discover]
Thought: Based on my observations, I'll determine the next step.
Action: [I'll take the appropriate action]

Let me start:"""


def add_few_shot(prompt: str, examples: list[tuple[str, str]]) -> str:
    if not examples or FEW_SHOT_MARKER in prompt:
        return prompt
    example_text = "\n\n".join(
        f"Example {i}:\nInput: {given}\nOutput: {expected}"
        for i, (given, expected) in enumerate(examples, start=1)
    )
    return f"""{FEW_SHOT_MARKER}

{example_text}

Now, please follow the same pattern for:
{prompt}"""


def examples_for_domain(domain: str) -> list[tuple[str, str]]:
    return list(FEW_SHOT_EXAMPLES.get(domain, []))


def add_structured_output(prompt: str, output_format: OutputFormat) -> str:
    if OUTPUT_FORMAT_MARKER in prompt:
        return prompt
    return f"{prompt}\n\n{OUTPUT_FORMAT_MARKER} {_FORMAT_INSTRUCTIONS[output_format]}"


def optimize_for_tokens(prompt: str) -> str:
    """Strip politeness filler and intensifiers, then normalize spacing.

    The result is single-spaced throughout, so any line structure added
    by earlier layers is flattened as well.
    """
    text = _WHITESPACE.sub(" ", prompt)
    text = _POLITE_FILLER.sub("", text)
    text = _INTENSIFIERS.sub("", text)
    text = _WHITESPACE.sub(" ", text)
    text = _SPACE_BEFORE_PUNCT.sub(r"\1", text)
    return text.strip()
