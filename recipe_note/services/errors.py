class ServiceError(Exception):
    pass


class InvalidInputError(ServiceError):
    pass


class MissingApiKeyError(ServiceError):
    def __init__(self, message: str = "Missing Gemini API key."):
        super().__init__(message)


class NoCaptionsError(ServiceError):
    def __init__(self, video_id: str):
        super().__init__(f"No captions available for video: {video_id}")
        self.video_id = video_id


class CaptionFetchFailedError(ServiceError):
    pass


class EmptyResponseError(ServiceError):
    def __init__(self, message: str = "Model reply contained no text."):
        super().__init__(message)


class MalformedJsonError(ServiceError):
    def __init__(self, reason: str, reply_text: str = ""):
        super().__init__(f"Model reply is not a JSON object: {reason}")
        self.reason = reason
        self.reply_text = reply_text


class ModelApiError(ServiceError):
    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class RateLimitedError(ModelApiError):
    pass


class RecipeNotFoundError(ServiceError):
    def __init__(self, recipe_id: str):
        super().__init__(f"Recipe not found: {recipe_id}")
        self.recipe_id = recipe_id
