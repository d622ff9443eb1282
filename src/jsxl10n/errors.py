class Jsxl10nError(Exception):
    """Base class for errors that abort an extraction run."""


class CatalogStructureError(Jsxl10nError):
    def __init__(self, message: str | None = None) -> None:
        super().__init__(
            message
            or "An error occurred while using the provided PO file. "
            "Please make sure it is valid by using `msgfmt -c`."
        )


class ExtractionError(Jsxl10nError):
    def __init__(self, filename: str, argument: str) -> None:
        self.filename = filename
        self.argument = argument
        super().__init__(f"Could not parse translatable in {filename}: {argument}")


class SourceSyntaxError(Jsxl10nError):
    def __init__(self, filename: str, line: int) -> None:
        self.filename = filename
        self.line = line
        super().__init__(f"Syntax error in {filename} near line {line}")
