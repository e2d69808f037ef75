"""Litestar plugin for signing workflow integration.

This module provides the SigningPlugin, which makes the tag policy and the
workflow builder available to route handlers and renders signing errors as
JSON responses.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from litestar.di import Provide
from litestar.plugins import InitPluginProtocol

from litestar_signing.builder import WorkflowBuilder
from litestar_signing.config import SigningConfig
from litestar_signing.core.policy import TagPolicy
from litestar_signing.exceptions import SigningError
from litestar_signing.web.exceptions import signing_error_handler

if TYPE_CHECKING:
    from litestar.config.app import AppConfig

__all__ = ["SigningPlugin"]


class SigningPlugin(InitPluginProtocol):
    """Litestar plugin for signing workflows.

    Example:
        Compiling a workflow in a route handler::

            from litestar import Litestar, post
            from litestar_signing import SigningConfig, SigningPlugin, WorkflowBuilder


            @post("/sessions/{session_id:int}/scenarios")
            async def create_scenario(session_id: int, data: dict, workflow_builder: WorkflowBuilder) -> dict:
                result = workflow_builder.build_scenario(...)
                return result.automaton.to_dict()


            app = Litestar(
                route_handlers=[create_scenario],
                plugins=[SigningPlugin(SigningConfig(approval_categories=["legal-review"]))],
            )
    """

    __slots__ = ("_builder", "_config", "_policy")

    def __init__(self, config: SigningConfig | None = None) -> None:
        """Initialize the plugin.

        Args:
            config: Optional configuration for the plugin.
        """
        self._config = config or SigningConfig()
        self._policy: TagPolicy | None = None
        self._builder: WorkflowBuilder | None = None

    @property
    def policy(self) -> TagPolicy:
        """Get the tag policy.

        Raises:
            RuntimeError: If accessed before plugin initialization.
        """
        if self._policy is None:
            msg = "SigningPlugin has not been initialized. Access policy after app startup."
            raise RuntimeError(msg)
        return self._policy

    @property
    def builder(self) -> WorkflowBuilder:
        """Get the workflow builder.

        Raises:
            RuntimeError: If accessed before plugin initialization.
        """
        if self._builder is None:
            msg = "SigningPlugin has not been initialized. Access builder after app startup."
            raise RuntimeError(msg)
        return self._builder

    def on_app_init(self, app_config: AppConfig) -> AppConfig:
        """Initialize the plugin when the Litestar app starts.

        Builds the tag policy and the workflow builder from the configuration,
        registers them as dependencies and, if enabled, registers the signing
        error handler.

        Args:
            app_config: The Litestar application configuration.

        Returns:
            The modified application configuration.
        """
        self._policy = self._config.build_policy()
        self._builder = self._config.build_builder(self._policy)

        def provide_policy() -> TagPolicy:
            return self._policy  # type: ignore[return-value]

        def provide_builder() -> WorkflowBuilder:
            return self._builder  # type: ignore[return-value]

        app_config.dependencies[self._config.dependency_key_policy] = Provide(
            provide_policy,
            sync_to_thread=False,
        )
        app_config.dependencies[self._config.dependency_key_builder] = Provide(
            provide_builder,
            sync_to_thread=False,
        )

        if self._config.register_exception_handlers:
            app_config.exception_handlers[SigningError] = signing_error_handler  # type: ignore[assignment]

        return app_config
