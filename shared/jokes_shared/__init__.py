from jokes_shared.models import ErrorResponse, Joke, JokeListResponse

__all__ = ["ErrorResponse", "Joke", "JokeListResponse"]
