"""
ToolOrchestrator - the tool-calling loop between a chat model and the tool registry.

States:
    START -> AWAITING_COMPLETION -> (EXECUTING_TOOLS -> AWAITING_COMPLETION)* -> DONE | ABORTED

Each round sends the whole conversation (plus tool descriptors) to the model. A
reply without tool calls ends the run. A reply with tool calls is appended as an
assistant message, every call is executed, and one tool message per call is
appended in the order the model issued them. After max_iterations rounds
without a final answer the run ends ABORTED with a fixed reply.

Tool failures, unparseable arguments, and a failed tool-list fetch are data, not
errors: only configuration and provider failures (and cancellation) escape run().
"""

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum

from maximo_gateway.llm.base import ChatClient
from maximo_gateway.llm.types import ChatReply, ChatRequest, Message, ToolCallRequest
from maximo_gateway.registry.client import RegistryClient
from maximo_gateway.registry.types import ToolDescriptor, ToolResult
from maximo_gateway.trace import TraceKind, TraceSink

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITERATIONS = 6
MAX_ITERATIONS_REPLY = "Tool orchestration exceeded max iterations."


class RunState(str, Enum):
    START = "start"
    AWAITING_COMPLETION = "awaiting_completion"
    EXECUTING_TOOLS = "executing_tools"
    DONE = "done"
    ABORTED = "aborted"


@dataclass
class RunResult:
    """Outcome of one orchestration run."""

    reply: str
    state: RunState
    iterations: int
    conversation: list[Message] = field(default_factory=list)
    tools_offered: int = 0
    tool_calls: int = 0

    @property
    def aborted(self) -> bool:
        return self.state is RunState.ABORTED


class ToolOrchestrator:
    """Runs one user message through the model, executing tools as requested."""

    def __init__(
        self,
        chat: ChatClient,
        registry: RegistryClient | None = None,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        parallel_tool_calls: bool = True,
        trace: TraceSink | None = None,
    ) -> None:
        """
        Initialize orchestrator.

        Args:
            chat:                Provider chat client
            registry:            Tool-registry client (None = tools unavailable)
            max_iterations:      Completion rounds allowed before aborting
            parallel_tool_calls: Run a batch of tool calls concurrently
            trace:               Sink for tool_args events
        """
        if max_iterations < 1:
            raise ValueError(f"max_iterations must be >= 1, got {max_iterations}")
        self._chat = chat
        self._registry = registry
        self._max_iterations = max_iterations
        self._parallel = parallel_tool_calls
        self._trace = trace
        self.state = RunState.START

    def _transition(self, state: RunState) -> None:
        logger.debug(f"Orchestrator: {self.state.value} -> {state.value}")
        self.state = state

    def tools_enabled(self, requested: bool) -> bool:
        """Tools run only when requested, a registry exists, and the provider speaks tools."""
        if not requested:
            return False
        if self._registry is None:
            return False
        if not self._chat.supports_tools:
            logger.warning(
                f"Tools requested but provider '{self._chat.provider}' does not support "
                "tool orchestration; continuing without tools"
            )
            return False
        return True

    async def run(
        self,
        user_text: str,
        model: str,
        system_prompt: str = "",
        temperature: float = 0.7,
        tenant: str = "default",
        enable_tools: bool = False,
    ) -> RunResult:
        """
        Process one user message to a final answer.

        Returns:
            RunResult with state DONE or ABORTED

        Raises:
            ProviderCallError: A completion request failed (fatal for the run)
        """
        self._transition(RunState.START)
        conversation: list[Message] = []
        if system_prompt:
            conversation.append(Message.system(system_prompt))
        conversation.append(Message.user(user_text))

        use_tools = self.tools_enabled(enable_tools)
        tools = await self._load_tools(tenant) if use_tools else []
        total_calls = 0

        for iteration in range(1, self._max_iterations + 1):
            self._transition(RunState.AWAITING_COMPLETION)
            reply = await self._chat.complete(
                ChatRequest(messages=list(conversation), model=model, temperature=temperature),
                tools,
            )

            if reply.is_terminal or not use_tools:
                conversation.append(Message.assistant(reply.text))
                self._transition(RunState.DONE)
                logger.info(
                    f"Orchestrator: done after {iteration} iteration(s), {total_calls} tool call(s)"
                )
                return RunResult(
                    reply=reply.text,
                    state=RunState.DONE,
                    iterations=iteration,
                    conversation=conversation,
                    tools_offered=len(tools),
                    tool_calls=total_calls,
                )

            conversation.append(Message.assistant(reply.text, reply.tool_calls))
            self._transition(RunState.EXECUTING_TOOLS)
            results = await self._execute_batch(reply, tenant)
            total_calls += len(results)
            for call, result in zip(reply.tool_calls, results):
                conversation.append(Message.tool(call.id, result.to_message_content()))

        self._transition(RunState.ABORTED)
        logger.warning(
            f"Orchestrator: aborted after {self._max_iterations} iteration(s) without a final answer"
        )
        return RunResult(
            reply=MAX_ITERATIONS_REPLY,
            state=RunState.ABORTED,
            iterations=self._max_iterations,
            conversation=conversation,
            tools_offered=len(tools),
            tool_calls=total_calls,
        )

    async def _load_tools(self, tenant: str) -> list[ToolDescriptor]:
        """Fetch tool descriptors once per run; a failed fetch means no tools."""
        try:
            return await self._registry.list_tools(tenant)
        except Exception as e:
            logger.warning(f"Tool list unavailable, continuing without tools: {e!r}")
            return []

    async def _execute_batch(self, reply: ChatReply, tenant: str) -> list[ToolResult]:
        """Execute every call of one reply, results in call order."""
        calls = reply.tool_calls
        if self._parallel and len(calls) > 1:
            return list(await asyncio.gather(*(self._execute(c, tenant) for c in calls)))
        return [await self._execute(c, tenant) for c in calls]

    async def _execute(self, call: ToolCallRequest, tenant: str) -> ToolResult:
        if self._trace is not None:
            self._trace.append(
                TraceKind.TOOL_ARGS,
                call.raw_arguments,
                meta={"tool": call.name, "call_id": call.id},
                tenant=tenant,
            )
        if not call.name:
            return ToolResult.failure(
                "invalid_tool_call", "tool call has no function name", status=0
            )

        arguments = call.parse_arguments()
        try:
            return await self._registry.invoke(call.name, arguments, tenant)
        except Exception as e:
            logger.exception(f"Tool {call.name} raised unexpectedly")
            return ToolResult.failure("tool_failed", f"{type(e).__name__}: {e}", status=0)
