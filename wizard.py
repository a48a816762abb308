"""
Wizard state and step navigation.
"""
from dataclasses import dataclass, field

from session_store import AccountService
from shorts_types import GeneratedImage, Niche, ScriptData, Step, User, VoiceData

STEPS: list[Step] = list(Step)


class PaywallRequired(Exception):
    """The user has no credits left and is not premium."""


def next_step(step: Step, user: User | None) -> Step:
    """Step after `step`; leaving niche selection requires credits or premium."""
    if step is Step.NICHE_SELECTION and AccountService.needs_paywall(user):
        raise PaywallRequired("No credits left. Upgrade to keep generating shorts.")
    index = STEPS.index(step)
    return STEPS[min(index + 1, len(STEPS) - 1)]


def previous_step(step: Step) -> Step:
    index = STEPS.index(step)
    return STEPS[max(index - 1, 0)]


@dataclass
class ShortProject:
    """Everything generated for one short."""

    niche: Niche | None = None
    script: ScriptData | None = None
    images: list[GeneratedImage] = field(default_factory=list)
    voice: VoiceData | None = None

    def update_script(self, script: ScriptData, accounts: AccountService | None = None,
                      user: User | None = None) -> None:
        # Only the first script of a project costs a credit; edits and regenerations are free
        if self.script is None and accounts is not None and user is not None:
            accounts.consume_credit(user)
        self.script = script

    def reset(self) -> None:
        self.niche = None
        self.script = None
        self.images = []
        self.voice = None
