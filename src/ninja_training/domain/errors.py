"""Domain errors surfaced to API handlers."""


class NinjaTrainingError(Exception):
    """Base class for errors with a user-facing message."""

    message = "Something went wrong. Please try again."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)
        self.message = message or self.message


class NoNutritionDataError(NinjaTrainingError):
    message = "No nutrition data available for this product."


class ProductNotFoundError(NinjaTrainingError):
    message = "Product not found for this barcode."


class InvalidVisionResponseError(NinjaTrainingError):
    message = "Invalid response format from OpenAI"


class VisionUpstreamError(NinjaTrainingError):
    message = "Failed to analyze image. Please try again."


class DuplicateCheckInError(NinjaTrainingError):
    message = "A check-in already exists for this date."


class EntryNotFoundError(NinjaTrainingError):
    message = "Food entry not found."


class AuthError(NinjaTrainingError):
    message = "An error occurred"
