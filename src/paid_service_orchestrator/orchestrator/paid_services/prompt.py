"""Console prompting and service-argument collection."""

from __future__ import annotations

import asyncio
import sys
from collections.abc import Callable
from typing import Any, TextIO

from paid_service_orchestrator.orchestrator.paid_services.capabilities import Prompt
from paid_service_orchestrator.orchestrator.paid_services.models import Question, ServiceField


class ConsolePrompt(Prompt):
    """Prompt on stdin/stdout.

    Blocking reads run in a worker thread so the event loop stays responsive.
    End of input is treated as "no answer" for the question being asked.
    """

    def __init__(
        self,
        *,
        input_func: Callable[[str], str] = input,
        output: TextIO | None = None,
    ) -> None:
        self._input = input_func
        self._output = output or sys.stdout

    async def ask(self, questions: list[Question]) -> dict[str, Any]:
        return await asyncio.to_thread(self._ask_all, questions)

    def _ask_all(self, questions: list[Question]) -> dict[str, Any]:
        answers: dict[str, Any] = {}
        for question in questions:
            try:
                answer = self._ask_one(question)
            except EOFError:
                break
            if answer is not None:
                answers[question.name] = answer
        return answers

    def _ask_one(self, question: Question) -> Any:
        label = f"{question.prefix} {question.message}" if question.prefix else question.message

        if question.type == "list":
            return self._ask_choice(question, label)

        if question.type == "confirm":
            default = bool(question.default) if question.default is not None else True
            hint = "(Y/n)" if default else "(y/N)"
            raw = self._input(f"{label} {hint} ").strip().lower()
            if not raw:
                return default
            return raw in {"y", "yes"}

        raw = self._input(f"{label} ")
        if not raw and question.default is not None:
            return question.default
        return raw

    def _ask_choice(self, question: Question, label: str) -> str | None:
        if not question.choices:
            return None

        print(label, file=self._output)
        for index, choice in enumerate(question.choices, start=1):
            print(f"  {index}) {choice}", file=self._output)

        while True:
            raw = self._input("> ").strip()
            if not raw and question.default in question.choices:
                return str(question.default)
            if raw in question.choices:
                return raw
            if raw.isdigit() and 1 <= int(raw) <= len(question.choices):
                return question.choices[int(raw) - 1]
            print("Please pick one of the listed options.", file=self._output)


async def confirm_service_use(
    *, prompt: Prompt, description: str, fields: list[ServiceField]
) -> dict[str, Any]:
    """Collect arguments for a service.

    One `input` question is asked per field; the service description is shown
    as the prefix of the first question. Blank answers are dropped.

    Returns:
        `{"arguments": {field name: answer}}`.
    """
    if not fields:
        return {"arguments": {}}

    questions = [
        Question(
            type="input",
            name=field.name,
            message=f"{field.description or field.name}:",
            prefix=f"[{description}]" if index == 0 and description else None,
        )
        for index, field in enumerate(fields)
    ]

    answers = await prompt.ask(questions)

    arguments = {
        field.name: answers[field.name]
        for field in fields
        if isinstance(answers.get(field.name), str) and answers[field.name].strip()
    }
    return {"arguments": arguments}
