"""
Execution orchestrator.

Pipeline per request:
    look up script -> resolve target -> bind parameters
    -> create tracking record -> execute -> update tracking record

Everything up to and including binding is validated before the tracking
record is created or the command is run.
"""

import logging
import uuid
from dataclasses import dataclass, field
from functools import partial
from typing import Any, Callable, Dict, List, Optional

from podrunner.config import CatalogConfig, TargetConfig, TrackingConfig
from podrunner.errors import ExecutionError, PodRunnerError, TrackingError
from podrunner.modules.binder import bind
from podrunner.modules.catalog import CatalogCache, ScriptDefinition, find_script, load_catalog
from podrunner.modules.cluster import TargetResolver
from podrunner.modules.executor import CommandExecutor, ExecutionResult
from podrunner.modules.tracking import TrackingClient, TrackingRecord, TrackingStatus

logger = logging.getLogger("podrunner.orchestrator")


@dataclass
class ExecutionRequest:
    """One inbound execute call."""

    script_name: str
    payload: Dict[str, Any] = field(default_factory=dict)
    correlation_id: str = field(default_factory=lambda: str(uuid.uuid4()))


@dataclass
class ExecutionOutcome:
    """What the caller gets back for a script that ran."""

    script_id: str
    script_name: str
    correlation_id: str
    result: ExecutionResult
    process_id: Optional[int] = None


class ExecutionOrchestrator:
    """Composes catalog, resolver, binder, executor and tracking."""

    def __init__(
        self,
        catalog_loader: Callable[[], List[ScriptDefinition]],
        resolver: TargetResolver,
        executor: CommandExecutor,
        tracking: TrackingClient,
        namespace: str,
        label_selector: str,
        tracking_stage: str = "EXECUTION",
        tracking_group: str = "ScriptExecution",
    ):
        self.catalog_loader = catalog_loader
        self.resolver = resolver
        self.executor = executor
        self.tracking = tracking
        self.namespace = namespace
        self.label_selector = label_selector
        self.tracking_stage = tracking_stage
        self.tracking_group = tracking_group

    @classmethod
    def from_config(
        cls,
        catalog_config: CatalogConfig,
        target_config: TargetConfig,
        tracking_config: TrackingConfig,
    ) -> "ExecutionOrchestrator":
        """Wire the default module implementations from configuration."""
        if catalog_config.cache_enabled:
            catalog_loader = CatalogCache(catalog_config.path).load
        else:
            catalog_loader = partial(load_catalog, catalog_config.path)

        return cls(
            catalog_loader=catalog_loader,
            resolver=TargetResolver(timeout=target_config.kubectl_timeout),
            executor=CommandExecutor(
                shell=target_config.shell, timeout=target_config.exec_timeout
            ),
            tracking=TrackingClient(tracking_config.url, timeout=tracking_config.timeout),
            namespace=target_config.namespace,
            label_selector=target_config.label_selector,
            tracking_stage=tracking_config.stage,
            tracking_group=tracking_config.group,
        )

    def list_scripts(self) -> List[ScriptDefinition]:
        return self.catalog_loader()

    async def _create_tracking(
        self, script: ScriptDefinition, correlation_id: str
    ) -> Optional[TrackingRecord]:
        try:
            return await self.tracking.create(
                name=script.name,
                correlation_id=correlation_id,
                stage=script.stage or self.tracking_stage,
                group=self.tracking_group,
            )
        except TrackingError as e:
            logger.error(
                f"Failed to create tracking record for script '{script.name}': {e}. "
                f"trackingId: {correlation_id}. Continuing without status updates."
            )
            return None

    async def execute(self, request: ExecutionRequest) -> ExecutionOutcome:
        """
        Run the requested script.

        Raises:
            ConfigurationError, NotFound, ValidationError, TargetUnavailable:
                Before any tracking record is created or command is run
            ExecutionError: The remote command failed; carries the outcome
        """
        correlation_id = request.correlation_id

        try:
            script = find_script(self.catalog_loader(), request.script_name)
            logger.info(
                f"Found definition for script '{script.name}' (ID: {script.id}). "
                f"trackingId: {correlation_id}"
            )

            target = await self.resolver.resolve_async(self.namespace, self.label_selector)
            logger.info(
                f"Target pod for script '{script.name}': {target} "
                f"(namespace: {self.namespace}). trackingId: {correlation_id}"
            )

            env_prefix = bind(script.parameters, request.payload)
        except PodRunnerError as e:
            e.correlation_id = correlation_id
            logger.warning(
                f"Execute request for '{request.script_name}' rejected: {e.message}. "
                f"trackingId: {correlation_id}"
            )
            raise

        record = await self._create_tracking(script, correlation_id)

        logger.info(
            f"Executing script '{script.name}' in pod '{target}'. trackingId: {correlation_id}"
        )
        result = await self.executor.execute_async(
            self.namespace, target, env_prefix + script.command
        )

        outcome = ExecutionOutcome(
            script_id=script.id,
            script_name=script.name,
            correlation_id=correlation_id,
            result=result,
            process_id=record.process_id if record else None,
        )

        if result.failed:
            logger.error(
                f"Execution FAILED for script '{script.name}' (ID: {script.id}) in pod "
                f"'{target}': {result.error}. trackingId: {correlation_id}"
            )
            await self.tracking.update(
                record, TrackingStatus.FAILED, f"Execution error: {result.error}\n{result.output}"
            )
            raise ExecutionError(
                f"Script execution failed: {result.error}", outcome, correlation_id
            )

        logger.info(
            f"Execution SUCCESSFUL for script '{script.name}' (ID: {script.id}) in pod "
            f"'{target}'. trackingId: {correlation_id}"
        )
        await self.tracking.update(record, TrackingStatus.SUCCESSFUL)
        return outcome
