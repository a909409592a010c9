"""Conversation orchestrator for visualcodex - drives one prompt-to-reply turn."""

import os
from typing import Callable, List, Optional, Tuple

from ..commands import ApprovalPolicy, CommandRunner, create_approval_policy, create_command_runner
from ..errors import AuthError, VisualCodexError
from ..files import FileAccessor, create_file_accessor
from ..llm import OperationParser, create_llm_client, create_payload_builder
from ..models import (
    AutonomyLevel, ConversationTurn, DirectResponse, FileRead, FileWrite, CommandExecution,
    Operation, OperationKind, PolicyDecision, TurnResult, TurnState
)
from ..utils.helpers import run_batch
from ..utils.logging import logger

# Kinds from the follow-up reply that are not merged into the turn
_FOLLOW_UP_EXCLUDED = (OperationKind.FILE_READ, OperationKind.DIRECT_RESPONSE)


class ConversationOrchestrator:
    """Sends a prompt to the model, interprets the reply and applies it.

    A turn makes at most two model calls: the initial one and, when the reply
    asked for files, one follow-up carrying their contents. Operations are
    then classified by the approval policy and performed or described.
    """

    def __init__(self,
                 config_manager,
                 client_factory: Callable = create_llm_client,
                 parser: Optional[OperationParser] = None,
                 policy: Optional[ApprovalPolicy] = None,
                 command_runner: Optional[CommandRunner] = None,
                 file_accessor_factory: Callable[[str], FileAccessor] = create_file_accessor):
        """Initialize the orchestrator.

        Args:
            config_manager: Source of a ConfigSnapshot via ``snapshot()``
            client_factory: Builds a chat client from (snapshot, api_key)
            parser: Operation parser (default extension set if None)
            policy: Approval policy (built-in table if None)
            command_runner: Shell command runner
            file_accessor_factory: Builds a file accessor for a working directory
        """
        self.config_manager = config_manager
        self.client_factory = client_factory
        self.parser = parser or OperationParser()
        self.policy = policy or create_approval_policy()
        self.command_runner = command_runner or create_command_runner()
        self.file_accessor_factory = file_accessor_factory

        logger.debug("ConversationOrchestrator initialized")

    def execute_turn(self, prompt: str, working_directory: Optional[str] = None,
                     autonomy_level=AutonomyLevel.SUGGEST) -> TurnResult:
        """Run one full turn and return a structured result.

        Turn-level failures (missing credential, unreachable or failing
        provider) come back as ``success=False``; this method does not raise
        them.

        Args:
            prompt: The user's message
            working_directory: Base for relative paths and commands (process cwd if None)
            autonomy_level: AutonomyLevel or its string form

        Returns:
            TurnResult with the formatted output or the error
        """
        try:
            level = AutonomyLevel.parse(autonomy_level)
        except ValueError as e:
            logger.error(str(e))
            return TurnResult(success=False, error=str(e), error_type="ValueError")

        turn = ConversationTurn(
            prompt=prompt,
            working_directory=working_directory or os.getcwd(),
            autonomy_level=level,
        )

        try:
            output = self._run_turn(turn)
        except VisualCodexError as e:
            turn.advance(TurnState.FAILED)
            logger.error(f"{type(e).__name__}: {e}")
            return TurnResult(success=False, error=str(e), error_type=type(e).__name__)

        return TurnResult(success=True, output=output, exit_code=0)

    def _run_turn(self, turn: ConversationTurn) -> str:
        # One settings lookup per turn
        snapshot = self.config_manager.snapshot()
        api_key = snapshot.get_credential()
        if not api_key:
            raise AuthError("API key not found. Please set it in the settings.")

        client = self.client_factory(snapshot, api_key)
        model = snapshot.get_default_model()
        payload_builder = create_payload_builder(snapshot.system_prompt)
        system_prompt = payload_builder.build_system_prompt(turn.working_directory)
        file_accessor = self.file_accessor_factory(turn.working_directory)

        turn.advance(TurnState.AWAITING_INITIAL_RESPONSE)
        logger.llm(f"Using model: {model}")
        response = client.complete_chat(system_prompt, turn.prompt, model)

        turn.advance(TurnState.EXTRACTING_OPERATIONS)
        turn.operations = self.parser.parse(response)

        reads = turn.operations_of(OperationKind.FILE_READ)
        if reads:
            turn.advance(TurnState.RESOLVING_READS)
            turn.read_results = self._resolve_reads(reads, file_accessor)

            if turn.read_results:
                turn.advance(TurnState.AWAITING_FOLLOW_UP)
                follow_up_prompt = payload_builder.build_follow_up_prompt(turn.read_results)
                self._follow_up(turn, client, system_prompt, follow_up_prompt, model)

        turn.advance(TurnState.APPLYING_POLICY)
        decisions = [(op, self.policy.classify(op.kind, turn.autonomy_level)) for op in turn.operations]
        described = sum(1 for _, decision in decisions if decision is PolicyDecision.DESCRIBE)
        if described:
            logger.policy(f"{described} operation(s) will only be described in {turn.autonomy_level.value} mode")

        turn.advance(TurnState.EXECUTING)
        self._execute(turn, decisions, file_accessor)

        turn.advance(TurnState.FORMATTING)
        output = "\n\n".join(turn.all_results())
        turn.advance(TurnState.DONE)
        return output

    def _resolve_reads(self, reads: List[Operation], file_accessor: FileAccessor) -> List[str]:
        """Read every requested file; results keep the request order."""
        def read_one(operation: FileRead) -> str:
            result = file_accessor.read(operation.path)
            if result.success:
                return f"File content ({operation.path}):\n\n{result.content}"
            return f"Error reading file {operation.path}: {result.error}"

        logger.file(f"Reading {len(reads)} requested file(s)")
        return run_batch(read_one, reads)

    def _follow_up(self, turn: ConversationTurn, client, system_prompt: str,
                   follow_up_prompt: str, model: str) -> None:
        """Make the single follow-up call and merge what it asks for.

        Reads requested by the follow-up are dropped so the exchange stays
        bounded. A failed follow-up leaves a note in the reply instead of
        failing the turn.
        """
        if turn.follow_up_done:
            raise RuntimeError("Follow-up round already made for this turn")
        turn.follow_up_done = True

        try:
            follow_up_response = client.complete_chat(system_prompt, follow_up_prompt, model)
        except VisualCodexError as e:
            logger.warning(f"Follow-up request failed, keeping results gathered so far: {e}")
            turn.operations.append(DirectResponse(content=f"Follow-up request failed: {e}"))
            return

        turn.operations.append(DirectResponse(content=follow_up_response))
        merged = [op for op in self.parser.parse(follow_up_response) if op.kind not in _FOLLOW_UP_EXCLUDED]
        if merged:
            logger.debug(f"Merged {len(merged)} operation(s) from the follow-up reply")
        turn.operations.extend(merged)

    def _execute(self, turn: ConversationTurn,
                 decisions: List[Tuple[Operation, PolicyDecision]],
                 file_accessor: FileAccessor) -> None:
        """Perform or describe each classified operation, section by section."""
        def by_kind(kind: OperationKind) -> List[Tuple[Operation, PolicyDecision]]:
            return [(op, decision) for op, decision in decisions if op.kind is kind]

        def write_one(operation: FileWrite) -> str:
            result = file_accessor.write(operation.path, operation.content)
            if result.success:
                return f"Successfully wrote to file: {operation.path}"
            return f"Error writing file {operation.path}: {result.error}"

        def run_one(operation: CommandExecution) -> str:
            result = self.command_runner.run(operation.command, turn.working_directory)
            if result.error:
                return f"Error executing command {operation.command}: {result.error}"
            text = f"Command: {operation.command}\nResult:\n{result.stdout}\n"
            if result.stderr:
                text += f"Error: {result.stderr}"
            return text

        turn.direct_results = self._render_section(
            by_kind(OperationKind.DIRECT_RESPONSE), lambda op: op.content
        )
        # Writes target distinct paths and run as one batch
        turn.write_results = self._render_section(
            by_kind(OperationKind.FILE_WRITE), write_one, concurrent=True
        )
        # Commands may depend on each other's effects and run in order
        turn.command_results = self._render_section(
            by_kind(OperationKind.COMMAND_EXECUTION), run_one
        )

    def _render_section(self, entries: List[Tuple[Operation, PolicyDecision]],
                        perform: Callable[[Operation], str],
                        concurrent: bool = False) -> List[str]:
        """Result strings for one kind of operation, in appearance order.

        Executed operations go through ``perform``, described ones through
        the policy's description, skipped ones produce nothing.
        """
        results: List[Optional[str]] = [None] * len(entries)
        to_perform = []
        for index, (operation, decision) in enumerate(entries):
            if decision is PolicyDecision.EXECUTE:
                to_perform.append(index)
            elif decision is PolicyDecision.DESCRIBE:
                results[index] = self.policy.describe(operation)

        operations = [entries[index][0] for index in to_perform]
        if concurrent:
            outputs = run_batch(perform, operations)
        else:
            outputs = [perform(operation) for operation in operations]
        for index, output in zip(to_perform, outputs):
            results[index] = output

        return [result for result in results if result is not None]


def create_orchestrator(config_manager, **kwargs) -> ConversationOrchestrator:
    """Create a conversation orchestrator.

    Args:
        config_manager: Source of configuration snapshots
        **kwargs: Component overrides passed to ConversationOrchestrator
    """
    return ConversationOrchestrator(config_manager, **kwargs)
