"""HTTP types: Request, Response, and the multi-value mappings they carry."""

from wren.http.forms import FormBindingError, FormData, UploadFile, bind_form, form_from
from wren.http.multidict import Headers, MultiDict, QueryParams
from wren.http.request import Request
from wren.http.response import Response

__all__ = [
    "FormBindingError",
    "FormData",
    "Headers",
    "MultiDict",
    "QueryParams",
    "Request",
    "Response",
    "UploadFile",
    "bind_form",
    "form_from",
]
