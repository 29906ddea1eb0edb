class ImportGuardError(Exception):
    pass


class HostCommandError(ImportGuardError):
    args_list: list[str]
    returncode: int | None
    stderr: str

    def __init__(self, args: list[str], returncode: int | None, stderr: str):
        self.args_list = args
        self.returncode = returncode
        self.stderr = stderr
        status = f"exit code {returncode}" if returncode is not None else "not run"
        detail = f": {stderr.strip()}" if stderr.strip() else ""
        super().__init__(f"Command {' '.join(args)!r} failed ({status}){detail}")
