class MalformedFrame(ValueError):
    """Raised when a frame is too short, not byte-like, or undecodable."""
    def __init__(self, message, frame=None, required=None):
        super().__init__(message)
        self.frame = frame
        self.required = required
