class PasteContractError(ValueError):
    """Error raised when caller-supplied paste configuration is malformed.

    Malformed HTML never raises; only a configuration that violates the documented contract does.
    """


class InvalidBlockRenderMapError(PasteContractError):
    """Error raised when a block-render map entry cannot qualify any element."""

    def __init__(self, block_type: object, reason: str):
        self.block_type = block_type
        self.message = f"Invalid block-render map entry for block type {block_type!r}: {reason}."
        super().__init__(self.message)
