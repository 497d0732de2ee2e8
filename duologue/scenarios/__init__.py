"""
Ready-made conversations showing the three chat patterns.

- comedy: two agents trade jokes until one signs off
- onboarding: sequential chats that carry a summary from one step to the next
- reflection: a writer revised by a critic that consults nested reviewers
"""
from duologue.scenarios.comedy import run_comedy
from duologue.scenarios.onboarding import run_onboarding
from duologue.scenarios.reflection import run_reflection

SCENARIOS = {
    "comedy": run_comedy,
    "onboarding": run_onboarding,
    "reflection": run_reflection,
}

__all__ = ["SCENARIOS", "run_comedy", "run_onboarding", "run_reflection"]
