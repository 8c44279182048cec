"""
Request dispatcher.

Routes public and private calls through one code path: builds the path,
signs private requests, assembles headers, delegates to the transport and
folds every outcome into an ApiResult.
"""

from typing import Dict, Mapping, Optional, Tuple

from kraken_client.core.config import DEFAULT_USER_AGENT
from kraken_client.core.exceptions import ConfigurationError, TransportError
from kraken_client.core.logger import get_logger
from kraken_client.models.request import (
    Credentials,
    HttpMethod,
    RequestContext,
    RequestOptions,
    Scalar,
    Visibility,
)
from kraken_client.models.result import ApiResult, ErrorKind
from kraken_client.services.auth.nonce import NonceGenerator
from kraken_client.services.auth.signer import serialize_params, sign_request
from kraken_client.services.exchange.decorators import log_api_call
from kraken_client.services.exchange.transport import Transport

logger = get_logger(__name__)

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
DEFAULT_TIMEOUT = 4.0


class RequestDispatcher:
    """
    Single entry point for every endpoint call.

    Outcomes:
        - private call without credentials: Err(CONFIGURATION), nothing sent
        - secret not decodable: Err(CONFIGURATION), nothing sent
        - transport failure: Err(TRANSPORT)
        - envelope with errors: Err(API), envelope attached
        - otherwise: Ok(result)
    """

    def __init__(
        self,
        credentials: Credentials,
        transport: Transport,
        nonce_generator: Optional[NonceGenerator] = None,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
    ):
        self.credentials = credentials
        self.transport = transport
        self.nonce_generator = nonce_generator or NonceGenerator()
        self.timeout = timeout
        self.user_agent = user_agent

    def build_request(self, context: RequestContext) -> Tuple[RequestOptions, Optional[str]]:
        """
        Turn a request context into transport options and body.

        Private contexts are stamped with nonce and signature.

        Raises:
            ConfigurationError: private call without usable credentials
        """
        creds = self.credentials
        path = context.path(creds.version)

        if context.visibility == Visibility.PRIVATE:
            if not creds.has_private_access:
                raise ConfigurationError(
                    "You must configure the API key and secret to make this request",
                    details={"endpoint": context.endpoint},
                )

            params: Dict[str, Scalar] = dict(context.params)
            if creds.otp and "otp" not in params:
                params["otp"] = creds.otp
            nonce = self.nonce_generator.next()
            params["nonce"] = nonce

            context.nonce = nonce
            context.params = params
            context.signature = sign_request(path, params, nonce, creds.api_secret)

            body = serialize_params(params)
            headers = {
                "API-Key": creds.api_key,
                "API-Sign": context.signature,
                "Content-Type": FORM_CONTENT_TYPE,
                "Content-Length": str(len(body.encode("utf-8"))),
            }
            method = HttpMethod.POST
        else:
            if context.params:
                path = f"{path}?{serialize_params(context.params)}"
            body = None
            headers = {"User-Agent": self.user_agent}
            method = HttpMethod.GET

        options = RequestOptions(
            host=creds.host,
            port=creds.port,
            protocol=creds.protocol,
            path=path,
            method=method,
            headers=headers,
            timeout=self.timeout,
        )
        return options, body

    @log_api_call
    async def send(
        self,
        visibility: Visibility,
        endpoint: str,
        params: Optional[Mapping[str, Scalar]] = None,
    ) -> ApiResult:
        """
        Dispatch one call.

        Args:
            visibility: public or private
            endpoint: endpoint name, e.g. ``Time`` or ``Balance``
            params: form fields in send order

        Returns:
            ApiResult, never raises for configuration, transport or
            exchange errors
        """
        context = RequestContext(
            visibility=Visibility(visibility),
            endpoint=endpoint,
            params=dict(params or {}),
        )

        try:
            options, body = self.build_request(context)
        except ConfigurationError as e:
            return ApiResult.from_exception(ErrorKind.CONFIGURATION, e)

        try:
            envelope = await self.transport.send(options, body)
        except TransportError as e:
            return ApiResult.from_exception(ErrorKind.TRANSPORT, e)

        return ApiResult.from_envelope(envelope)

    async def close(self) -> None:
        await self.transport.close()
