class ImagePipelineError(Exception):
    """Base class for failures that abort an image pipeline invocation."""


class DecodeError(ImagePipelineError):
    """The image source is not a usable data URL or byte buffer."""


class EncodeError(ImagePipelineError):
    """The image codec could not read or re-encode the decoded bytes."""


class StorageError(ImagePipelineError):
    """Creating, writing or renaming a file in the upload directory failed."""


class StaleReferenceWarning(UserWarning):
    """A variant file scheduled for deletion was already gone. Logged only."""
