"""JSON response class used for every courier reply."""

from fastapi.responses import JSONResponse

JSON_CONTENT_TYPE = "application/json; charset=utf-8"


class CourierJSONResponse(JSONResponse):
    """JSONResponse that always declares the utf-8 charset."""

    media_type = JSON_CONTENT_TYPE
