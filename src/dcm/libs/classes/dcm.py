import logging
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from typing import Any

from rich.console import Console

from dcm.app_config import AppConfig
from dcm.app_state import AppState
from dcm.libs.classes.errors import (
    CommandError,
    ConfigShapeError,
    DcmError,
    MissingFieldError,
    NotFoundError,
)
from dcm.libs.classes.runner import Command, Runner
from dcm.libs.functions.for_each_service import for_each_service
from dcm.libs.functions.resolve import resolve_str
from dcm.libs.schemas.labels import DEFAULT_BRANCH, SERVICE_SELF, Label
from dcm.libs.schemas.result import Result

logger = logging.getLogger(__name__)

USAGE = """
Docker Compose Manager

Usage:
  dcm help                Show this message
                          shorthand ver.: `dcm h`
  dcm setup               Check out the repositories of all the services
  dcm run [<args>]        Run docker-compose commands. If <args> is not given,
                          by default DCM will run `up` command.
                          <args>: execute, init, up, build, start, stop, restart
                          shorthand ver.: `dcm r [<args>]`
  dcm build               Run build command that (re)create all the service
                          images, shorthand ver.: `dcm b`
  dcm dir [<service>]     Print the service's folder. If <service> is not
                          given, print the project folder
  dcm shell <service>     Log into a given service container
                          shorthand ver.: `dcm sh <service>`
  dcm branch [<service>]  Display the current branch of DCM and the services,
                          or of the given service only
                          shorthand ver.: `dcm br [<service>]`
  dcm update [<service>]  Update all the services, or the given service only
  dcm purge [<type>]      Remove either all the containers or all the images
                          or everything. If <type> is not given, by default
                          DCM will purge the containers
                          <type>: images|img, containers|con, all
                          shorthand ver.: `dcm rm [<type>]`
  dcm list                List all the configured services
                          shorthand ver.: `dcm ls`

Example:
  Initial setup
    dcm setup
    dcm run

  Rebuild services after switching branch
    dcm build
    dcm run

  Log into a service container
    dcm shell api
"""


class Dcm:
    def __init__(
        self,
        app_state: AppState,
        runner: Runner,
        *,
        console: Console | None = None,
        err_console: Console | None = None,
    ) -> None:
        self.app_state = app_state
        self.runner = runner
        self.console = console or Console(emoji=False)
        self.err_console = err_console or Console(stderr=True, emoji=False)

        self._commands: dict[str, Callable[..., Result]] = {
            "help": self.help,
            "h": self.help,
            "setup": self.setup,
            "run": self.run,
            "r": self.run,
            "build": self.build,
            "b": self.build,
            "dir": self.dir,
            "shell": self.shell,
            "sh": self.shell,
            "branch": self.branch,
            "br": self.branch,
            "update": self.update,
            "purge": self.purge,
            "rm": self.purge,
            "list": self.list,
            "ls": self.list,
        }

    @property
    def config(self) -> AppConfig:
        return self.app_state.app_config

    @property
    def services(self) -> Mapping[Any, Any]:
        return self.app_state.services

    def _echo(self, text: str, *, end: str = "\n") -> None:
        self.console.print(
            text, end=end, markup=False, emoji=False, highlight=False, soft_wrap=True
        )

    def report(self, service: str, result: Result) -> None:
        self.err_console.print(
            f"{service}: {result.error}",
            style="yellow",
            markup=False,
            emoji=False,
            highlight=False,
            soft_wrap=True,
        )

    def _for_each_service(self, action: Callable[[str, Mapping[str, Any]], Result]) -> Result:
        return for_each_service(self.services, action, on_soft_error=self.report)

    def _service_dir(self, service: str) -> Path:
        return self.config.srv / service

    def _service_config(self, service: str) -> Mapping[str, Any] | Result:
        if service not in self.services:
            return Result.soft(NotFoundError("Service not exists."))

        config = self.services[service]
        if not isinstance(config, Mapping):
            return Result.hard(
                ConfigShapeError(f"Error reading configs for service [{service}]")
            )
        return config

    def command(self, args: Sequence[str]) -> Result:
        if not args:
            self.usage()
            return Result(1)

        name, *more_args = args
        handler = self._commands.get(name)
        if handler is None:
            logger.debug("Unknown command %s", name)
            self.usage()
            return Result(127)

        return handler(*more_args)

    def usage(self) -> None:
        self._echo(USAGE)

    def help(self, *_: str) -> Result:
        self.usage()
        return Result.ok()

    # setup

    def setup(self, *_: str) -> Result:
        try:
            self.config.srv.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            return Result.hard(f"Error creating checkout root [{self.config.srv}]: {e}")

        return self._for_each_service(self._setup_service)

    def _setup_service(self, service: str, config: Mapping[str, Any]) -> Result:
        if resolve_str(config, "image") is not None:
            logger.info("Service %s uses a docker hub image, nothing to check out", service)
            return Result.ok()

        service_dir = self._service_dir(service)
        if service_dir.exists():
            self._echo(f"{service}: folder {service_dir} exists, skipping")
            return Result.ok()

        repository = resolve_str(config, "labels", Label.REPOSITORY)
        if repository is None:
            return Result.hard(
                MissingFieldError(
                    f"Error reading git repository config for service [{service}]"
                )
            )

        try:
            self.runner.run(
                Command.of("git", "clone", repository, str(service_dir), cwd=self.config.dir)
            )
        except CommandError as e:
            return Result.hard(
                f"Error cloning git repository for service [{service}]: {e}"
            )

        branch = resolve_str(config, "labels", Label.BRANCH)
        if branch is not None:
            try:
                self.runner.run(Command.of("git", "checkout", branch, cwd=service_dir))
            except CommandError as e:
                return Result.hard(e)

        return Result.ok()

    # run

    def run(self, *args: str) -> Result:
        sub, *more_args = args or ("up",)
        project = self.config.project

        match sub:
            case "execute":
                return self.execute(*more_args)
            case "init":
                self._echo(f"Initializing project [{project}]...")
                return self.init()
            case "build":
                self._echo(f"Building project [{project}]...")
                return self.execute("build")
            case "start":
                self._echo(f"Starting project [{project}]...")
                return self.execute("start")
            case "stop":
                self._echo(f"Stopping project [{project}]...")
                return self.execute("stop")
            case "restart":
                self._echo(f"Restarting project [{project}]...")
                return self.execute("restart")
            case "up":
                self._echo(f"Bringing up project [{project}]...")
                return self.up()
            case _:
                return self.run("up")

    def execute(self, *args: str) -> Result:
        env = {
            "COMPOSE_PROJECT_NAME": self.config.project,
            "COMPOSE_FILE": str(self.config.file),
        }
        try:
            self.runner.run(
                Command.of("docker-compose", *args, cwd=self.config.dir, env=env)
            )
        except CommandError as e:
            envs = ", ".join(f"{k}={v}" for k, v in env.items())
            return Result.hard(
                f"Error executing docker-compose with args [{', '.join(args)}], "
                f"and envs [{envs}]: {e}"
            )
        return Result.ok()

    def init(self) -> Result:
        return self._for_each_service(self._init_service)

    def _init_service(self, service: str, config: Mapping[str, Any]) -> Result:
        script = resolve_str(config, "labels", Label.INITSCRIPT)
        if script is None:
            self._echo(f"Skipping init script for service: {service} ...")
            return Result.ok()

        try:
            self.runner.run(Command.of("/bin/bash", script, cwd=self._service_dir(service)))
        except CommandError as e:
            return Result.hard(
                f"Error executing init script [{script}] for service [{service}]: {e}"
            )
        return Result.ok()

    def up(self) -> Result:
        result = self.execute("up", "-d", "--force-recreate")
        if result.is_hard:
            return result
        return self.init()

    def build(self, *_: str) -> Result:
        return self.run("build")

    # dir

    def dir(self, *args: str) -> Result:
        directory = self.config.dir
        if args:
            service_dir = self._service_dir(args[0])
            if service_dir.exists():
                directory = service_dir

        self._echo(str(directory), end="")
        return Result.ok()

    # shell

    def shell(self, *args: str) -> Result:
        if not args:
            return Result.hard("Error: no service name specified.")

        try:
            cid = self.get_container_id(args[0])
            self.runner.run(Command.of("docker", "exec", "-it", cid, "bash"))
        except DcmError as e:
            return Result.hard(e)

        return Result.ok()

    def get_container_id(self, service: str) -> str:
        prefix = f"{self.config.project}_{service}_"
        out = self.runner.output(Command.of("docker", "ps", "-q", "-f", f"name={prefix}"))

        cid = out.strip()
        if not cid:
            raise NotFoundError(f"Error: no running container name starts with {prefix}")
        return cid

    def get_image_repository(self, service: str) -> str | None:
        repository = f"{self.config.project}_{service}"
        out = self.runner.output(Command.of("docker", "images"))

        for line in out.splitlines():
            columns = line.split()
            if columns and columns[0] == repository:
                return repository
        return None

    # branch

    def branch(self, *args: str) -> Result:
        if args:
            return self.branch_for_one(args[0])

        result = self.branch_for_one(SERVICE_SELF)
        if result.is_hard:
            return result
        if result.is_soft:
            self.report(SERVICE_SELF, result)

        return self._for_each_service(self._branch_for_service)

    def branch_for_one(self, service: str) -> Result:
        if service == SERVICE_SELF and service not in self.services:
            return self._print_branch(service, self.config.dir)

        config = self._service_config(service)
        if isinstance(config, Result):
            return config

        return self._branch_for_service(service, config)

    def _branch_for_service(self, service: str, config: Mapping[str, Any]) -> Result:
        image = resolve_str(config, "image")
        if image is not None:
            self._echo(f"{service}: Docker hub image: {image}")
            return Result.ok()

        return self._print_branch(service, self._service_dir(service))

    def _print_branch(self, service: str, directory: Path) -> Result:
        if not directory.is_dir():
            return Result.soft(NotFoundError(f"Directory not found: {directory}"))

        try:
            out = self.runner.output(
                Command.of("git", "rev-parse", "--abbrev-ref", "HEAD", cwd=directory)
            )
        except CommandError as e:
            return Result.soft(e)

        self._echo(f"{service}: {out.strip()}")
        return Result.ok()

    # update

    def update(self, *args: str) -> Result:
        if args:
            return self.update_for_one(args[0])
        return self._for_each_service(self._update_service)

    def update_for_one(self, service: str) -> Result:
        config = self._service_config(service)
        if isinstance(config, Result):
            return config
        return self._update_service(service, config)

    def _update_service(self, service: str, config: Mapping[str, Any]) -> Result:
        if resolve_str(config, "labels", Label.UPDATEABLE) == "false":
            return Result.soft("Service not updateable. Skipping the update.")

        image = resolve_str(config, "image")
        if image is not None:
            self._echo(f"{service}: pulling docker hub image {image}")
            try:
                self.runner.run(Command.of("docker", "pull", image))
            except CommandError as e:
                return Result.soft(e)
            return Result.ok()

        service_dir = self._service_dir(service)
        if not service_dir.is_dir():
            return Result.soft(NotFoundError(f"Directory not found: {service_dir}"))

        branch = resolve_str(config, "labels", Label.BRANCH) or DEFAULT_BRANCH
        self._echo(f"{service}: updating branch {branch}")
        try:
            self.runner.run(Command.of("git", "checkout", branch, cwd=service_dir))
            self.runner.run(Command.of("git", "pull", cwd=service_dir))
        except CommandError as e:
            return Result.soft(e)

        return Result.ok()

    # purge

    def purge(self, *args: str) -> Result:
        match args[0] if args else "containers":
            case "images" | "img":
                return self.purge_images()
            case "containers" | "con":
                return self.purge_containers()
            case "all":
                return self.purge_all()
            case _:
                return self.purge_containers()

    def purge_images(self) -> Result:
        return self._for_each_service(self._purge_image)

    def _purge_image(self, service: str, _: Mapping[str, Any]) -> Result:
        try:
            repository = self.get_image_repository(service)
            if repository is None:
                self._echo(f"{service}: no local image to remove")
                return Result.ok()
            self.runner.run(Command.of("docker", "rmi", repository))
        except CommandError as e:
            return Result.soft(e)
        return Result.ok()

    def purge_containers(self) -> Result:
        return self._for_each_service(self._purge_container)

    def _purge_container(self, service: str, _: Mapping[str, Any]) -> Result:
        try:
            cid = self.get_container_id(service)
            self.runner.run(Command.of("docker", "kill", cid))
            self.runner.run(Command.of("docker", "rm", "-v", cid))
        except DcmError as e:
            return Result.soft(e)
        return Result.ok()

    def purge_all(self) -> Result:
        result = self.purge_containers()
        if result.is_hard:
            return result
        return self.purge_images()

    # list

    def list(self, *_: str) -> Result:
        for service in self.services:
            self._echo(str(service))
        return Result.ok()
