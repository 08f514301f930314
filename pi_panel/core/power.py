from .models import CommandResult
from .tools import CommandRunner, ToolLaunchError, TOOL_EXECUTION_FAILED, TOOL_LAUNCH_FAILED


SHUTDOWN_ARGV = ["shutdown", "-h", "now"]
REBOOT_ARGV = ["reboot"]


class PowerControl:

    def __init__(self, runner: CommandRunner):
        self.runner = runner

    def shutdown(self) -> CommandResult:
        return self._power(SHUTDOWN_ARGV, "Shutting down...")

    def reboot(self) -> CommandResult:
        return self._power(REBOOT_ARGV, "Rebooting...")

    def _power(self, argv, in_progress: str) -> CommandResult:
        tool = argv[0]
        try:
            res = self.runner.run(argv)
        except ToolLaunchError:
            return CommandResult.failure(TOOL_LAUNCH_FAILED, f"{tool} command failed to execute")
        if res.exit_code != 0:
            return CommandResult.failure(
                TOOL_EXECUTION_FAILED,
                f"{tool} command exited abnormally, error output:\n{res.stderr}"
            )
        return CommandResult.success(in_progress)
