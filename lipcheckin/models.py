from enum import Enum
from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List, Optional, Tuple


class RuleKind(str, Enum):
    SUCCESS = "success"
    ALREADY_DONE_CODE = "already_done_code"
    ALREADY_DONE_KEYWORD = "already_done_keyword"
    POSSIBLY_DONE_CODE = "possibly_done_code"


class Verdict(str, Enum):
    SUCCESS = "success"
    ALREADY_DONE = "already_done"
    POSSIBLY_DONE = "possibly_done"
    FAILURE = "failure"


# Evaluation order; first matching rule wins.
RULE_PRECEDENCE = (
    RuleKind.SUCCESS,
    RuleKind.ALREADY_DONE_CODE,
    RuleKind.ALREADY_DONE_KEYWORD,
    RuleKind.POSSIBLY_DONE_CODE,
)


class ClassificationRule(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: RuleKind
    code: Optional[int] = None
    keywords: Tuple[str, ...] = ()


class TaskDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    url: str
    method: str = "POST"
    body: Dict[str, Any] = Field(default_factory=dict)
    success_code: int = 0
    success_keyword: Optional[str] = "ok"
    already_done_code: Optional[int] = None
    already_done_keywords: Tuple[str, ...] = ()
    possibly_done_code: Optional[int] = None

    def rules(self) -> Tuple[ClassificationRule, ...]:
        """Classification rules for this task in evaluation order."""
        rules = {
            RuleKind.SUCCESS: ClassificationRule(
                kind=RuleKind.SUCCESS,
                code=self.success_code,
                keywords=(self.success_keyword,) if self.success_keyword else (),
            ),
        }
        if self.already_done_code is not None:
            rules[RuleKind.ALREADY_DONE_CODE] = ClassificationRule(
                kind=RuleKind.ALREADY_DONE_CODE, code=self.already_done_code)
        if self.already_done_keywords:
            rules[RuleKind.ALREADY_DONE_KEYWORD] = ClassificationRule(
                kind=RuleKind.ALREADY_DONE_KEYWORD, keywords=self.already_done_keywords)
        if self.possibly_done_code is not None:
            rules[RuleKind.POSSIBLY_DONE_CODE] = ClassificationRule(
                kind=RuleKind.POSSIBLY_DONE_CODE, code=self.possibly_done_code)
        return tuple(rules[kind] for kind in RULE_PRECEDENCE if kind in rules)


ICONS = {
    Verdict.SUCCESS: "✅",
    Verdict.ALREADY_DONE: "ℹ️",
    Verdict.POSSIBLY_DONE: "ℹ️",
    Verdict.FAILURE: "❌",
}
CRASH_ICON = "🆘"


class TaskResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    verdict: Verdict
    succeeded: bool
    already_completed: bool = False
    message: str
    http_status: int
    details: Any = None

    @property
    def icon(self) -> str:
        return ICONS[self.verdict]


class CheckinOutcome(BaseModel):
    account: Optional[int] = None
    task: Optional[str] = None
    status: str  # success | already_completed | possibly_completed | failed | error | config_error
    message: str
    http_status: Optional[int] = None


class RunSummary(BaseModel):
    title: str
    lines: List[str] = Field(default_factory=list)
    timestamp: Optional[str] = None

    def render(self) -> str:
        body = "\n".join(self.lines)
        if self.timestamp:
            body += f"\n\n⏰ Time: {self.timestamp}"
        return body


class RunReport(BaseModel):
    trigger: str
    summary: RunSummary
    outcomes: List[CheckinOutcome]
    accounts_processed: int = 0

    @property
    def aggregate(self) -> str:
        """ok | partial | failed | config_error"""
        if any(o.status == "config_error" for o in self.outcomes):
            return "config_error"
        good = [o for o in self.outcomes if o.status in ("success", "already_completed")]
        if len(good) == len(self.outcomes):
            return "ok"
        if not good:
            return "failed"
        return "partial"
