"""NX-API client.

Sends CLI commands to the device wrapped in ``ins_api`` JSON messages and
returns the device's answers. CLI rejections surface as :class:`CliError`.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from tacacs_node.config.schema import NodeConfigSchema
from tacacs_node.exceptions import (
    CliError,
    NodeAuthenticationError,
    NodeConnectionError,
)
from tacacs_node.utils.logger import get_logger
from tacacs_node.utils.security import redact_command

logger = get_logger(__name__)

INS_API_PATH = "/ins"
INS_API_VERSION = "1.0"
CMD_TYPE_SHOW_ASCII = "cli_show_ascii"
CMD_TYPE_CONF = "cli_conf"
COMMAND_SEPARATOR = " ;"


class NxapiClient:
    """Thin synchronous NX-API client over a pooled ``requests.Session``."""

    def __init__(
        self,
        config: NodeConfigSchema,
        session: requests.Session | None = None,
    ):
        self.node_config = config
        self.url = f"{config.base_url}{INS_API_PATH}"
        # Timeouts: (connect, read)
        self._timeout = (config.connect_timeout, config.timeout)
        self._session = session or requests.Session()
        self._session.auth = (config.username, config.password)
        self._session.headers.update({"content-type": "application/json"})
        self._session.verify = config.verify_tls
        adapter = HTTPAdapter(
            max_retries=Retry(
                total=config.retries,
                connect=config.retries,
                read=0,
                backoff_factor=0.3,
                status_forcelist=(502, 503, 504),
                allowed_methods=frozenset({"POST"}),
                raise_on_status=False,
            )
        )
        if session is None:
            self._session.mount("http://", adapter)
            self._session.mount("https://", adapter)

    def __enter__(self) -> NxapiClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        self._session.close()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def show(self, command: str) -> str:
        """Run a show command and return its ASCII output."""
        outputs = self._request(CMD_TYPE_SHOW_ASCII, [command])
        body = outputs[0].get("body", "") if outputs else ""
        return body if isinstance(body, str) else str(body)

    def config(self, commands: str | Iterable[str]) -> None:
        """Apply one or more configuration commands in order."""
        if isinstance(commands, str):
            commands = [commands]
        commands = [c for c in commands if c and c.strip()]
        if not commands:
            return
        self._request(CMD_TYPE_CONF, commands)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    @staticmethod
    def build_payload(cmd_type: str, commands: list[str]) -> dict[str, Any]:
        return {
            "ins_api": {
                "version": INS_API_VERSION,
                "type": cmd_type,
                "chunk": "0",
                "sid": "1",
                "input": COMMAND_SEPARATOR.join(commands),
                "output_format": "json",
            }
        }

    def _request(self, cmd_type: str, commands: list[str]) -> list[dict[str, Any]]:
        redacted = [redact_command(c) for c in commands]
        logger.debug(
            "Sending NX-API request",
            event="tacacs_node.client.request",
            host=self.node_config.host,
            cmd_type=cmd_type,
            commands=redacted,
        )
        try:
            resp = self._session.post(
                self.url,
                json=self.build_payload(cmd_type, commands),
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            logger.warning(
                "NX-API request failed",
                event="tacacs_node.client.transport_error",
                host=self.node_config.host,
                error=str(exc),
            )
            raise NodeConnectionError(
                f"Cannot reach {self.url}: {exc}", {"host": self.node_config.host}
            ) from exc

        if resp.status_code == 401:
            raise NodeAuthenticationError(
                f"Device {self.node_config.host} rejected credentials for "
                f"'{self.node_config.username}'",
                {"host": self.node_config.host, "status": resp.status_code},
            )

        try:
            data = resp.json()
        except ValueError:
            data = None

        outputs = self._extract_outputs(data)
        if outputs is None:
            raise NodeConnectionError(
                f"Unexpected NX-API response from {self.node_config.host} "
                f"(HTTP {resp.status_code})",
                {"host": self.node_config.host, "status": resp.status_code},
            )

        for index, output in enumerate(outputs):
            code = str(output.get("code", ""))
            if code != "200":
                # outputs line up with the commands that produced them
                command = redacted[index] if index < len(redacted) else redacted[-1]
                err = CliError(
                    command,
                    clierror=redact_command(str(output.get("clierror", "") or "")),
                    msg=redact_command(str(output.get("msg", "") or "")),
                    code=code,
                )
                logger.info(
                    "Device rejected CLI command",
                    event="tacacs_node.client.cli_error",
                    host=self.node_config.host,
                    command=command,
                    code=code,
                    clierror=err.clierror.strip(),
                )
                raise err
        return outputs

    @staticmethod
    def _extract_outputs(data: Any) -> list[dict[str, Any]] | None:
        if not isinstance(data, dict):
            return None
        ins_api = data.get("ins_api")
        if not isinstance(ins_api, dict):
            return None
        outputs = (ins_api.get("outputs") or {}).get("output")
        if isinstance(outputs, dict):
            return [outputs]
        if isinstance(outputs, list) and all(isinstance(o, dict) for o in outputs):
            return outputs
        return None
