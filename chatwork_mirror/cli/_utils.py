from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import Callable

from typing_extensions import override

from click import BadParameter, MissingParameter, Parameter
from pydantic import ValidationError
from typer import Context, Exit, Typer
from typer.core import TyperCommand, TyperOption
from typer.models import CommandFunctionType

from ..core import ChatworkError, Credentials, Session
from ..tools.config import Config

OPERATION_EPILOG = """
    Chatwork options can be passed in the following order of precedence:

    * CLI options

    * Environment variables

    * .env file

    * Config file
    """
"""
Epilog to show under operation command options.
"""

OPTION_MSG = "Set via CLI option, environment variable, .env file, or config file."
"""
Message to show upon missing option.
"""


MainOption = partial(TyperOption, show_envvar=True, show_default=True)

EMAIL_OPTION = MainOption(
    param_decls=["--email"],
    type=str,
    default=None,
    help="Chatwork account email",
    envvar="CHATWORK_EMAIL",
)
PASSWORD_OPTION = MainOption(
    param_decls=["--password"],
    type=str,
    default=None,
    help="Chatwork password",
    envvar="CHATWORK_PASSWORD",
)
ENDPOINT_OPTION = MainOption(
    param_decls=["--endpoint"],
    type=str,
    default=None,
    help="Gateway URL, e.g. https://kcw.kddi.ne.jp/gateway.php",
    envvar="CHATWORK_ENDPOINT",
)
CONFIG_OPTION = MainOption(
    param_decls=["--config"],
    type=Path,
    default=None,
    help="Path to .yaml config file",
    envvar="CHATWORK_CONFIG",
)


class MainTyper(Typer):
    """
    Top-level app with preconfigured settings.
    """

    def __init__(self, name: str, *, help: str):
        return super().__init__(
            name=name,
            help=help,
            rich_markup_mode="markdown",
            no_args_is_help=True,
            add_completion=False,
        )


class OperationTyper(MainTyper):
    """
    App whose commands can operate on a logged-in session.
    """

    def command(
        self,
        name: str | None = None,
        *,
        require_session: bool = False,
    ) -> Callable[[CommandFunctionType], CommandFunctionType]:
        cls = _get_command_cls(require_session=require_session)
        epilog = OPERATION_EPILOG if require_session else None

        return super().command(name, cls=cls, epilog=epilog)


class BaseOperationCommand(TyperCommand):
    chatwork_require_session: bool

    @override
    def get_params(self, ctx: Context) -> list[Parameter]:
        params: list[Parameter] = []

        if self.chatwork_require_session:
            params += [
                EMAIL_OPTION,
                PASSWORD_OPTION,
                ENDPOINT_OPTION,
                CONFIG_OPTION,
            ]

        return _merge_params(super().get_params(ctx), params)

    @override
    def invoke(self, ctx: Context):
        # extract chatwork params into context
        ctx.obj = OperationContext(
            email=ctx.params.pop("email", None),
            password=ctx.params.pop("password", None),
            endpoint=ctx.params.pop("endpoint", None),
            config_path=ctx.params.pop("config", None),
        )

        return super().invoke(ctx)


@dataclass(kw_only=True)
class OperationContext:
    """
    Encapsulates raw Chatwork options from user.
    """

    email: str | None
    password: str | None
    endpoint: str | None
    config_path: Path | None


@dataclass(kw_only=True)
class OperationParams:
    """
    Encapsulates top-level Chatwork context needed for commands.
    """

    session: Session | None
    config: Config


def get_operation_params(ctx: Context) -> OperationParams:
    """
    Get config and session from CLI options, environment variables and/or
    config file.
    """

    # lookup command
    cmd = ctx.command
    assert isinstance(cmd, BaseOperationCommand)

    # lookup operation
    operation = ctx.obj
    assert isinstance(operation, OperationContext)

    config = _load_config(ctx, operation)
    session: Session | None = None

    if cmd.chatwork_require_session:
        credentials = config.credentials

        if credentials is None:
            raise MissingParameter(
                message=OPTION_MSG,
                ctx=ctx,
                param_hint=["email", "password"],
                param_type="option",
            )

        # create a new session after validating args
        try:
            session = Session(
                credentials, config=config, logger=logging.getLogger()
            )
        except ChatworkError as e:
            logging.error(f"Failed to create session: {e}")
            raise Exit(1)

    return OperationParams(session=session, config=config)


def _load_config(ctx: Context, operation: OperationContext) -> Config:
    """
    Load config file if provided and apply CLI/environment overrides.
    """
    values: dict[str, str] = {}

    if operation.config_path is not None:
        try:
            config = Config.load_yaml(operation.config_path)
        except (OSError, ValueError) as e:
            raise BadParameter(str(e), ctx=ctx, param=CONFIG_OPTION)
    else:
        config = Config()

    # options take precedence over config file
    if operation.email:
        values["email"] = operation.email
    if operation.password:
        values["password"] = operation.password
    if operation.endpoint:
        values["endpoint"] = operation.endpoint

    if not values:
        return config

    try:
        return Config.model_validate(config.model_dump() | values)
    except ValidationError as e:
        raise BadParameter(str(e), ctx=ctx)


def _get_command_cls(*, require_session: bool) -> type[BaseOperationCommand]:
    """
    Get a command class with required params.
    """

    class Command(BaseOperationCommand):
        chatwork_require_session = require_session

    return Command


def _merge_params(
    super_params: list[Parameter], params: list[Parameter]
) -> list[Parameter]:
    """
    Merge params with superclass, keeping help param at end.
    """
    return super_params[:-1] + params + [super_params[-1]]
