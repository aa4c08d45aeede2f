"""
Delegator - Routes payloads to external tool servers.

Responsibilities:
- Resolve configured servers into process or HTTP targets once, at load time
- Process mode: spawn the command, feed the JSON payload on stdin, collect stdout
- HTTP mode: POST the JSON payload and return the response body
- Surface every failure as a typed DelegationError

There are no retries and no fallback between modes. Callers apply their
own retry policy.
"""

import asyncio
import json
import logging
import os
from typing import Any, Literal, Mapping, Optional, Union

import aiohttp
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

# Longest slice of stderr or response body kept on an error
ERROR_EXCERPT_CHARS = 500


class DelegationError(Exception):
	"""Base class for delegation failures."""

	def __init__(self, server_name: str, message: str):
		super().__init__(message)
		self.server_name = server_name


class ServerNotFound(DelegationError):
	"""Raised when a server name is not configured."""

	def __init__(self, server_name: str):
		super().__init__(server_name, f"MCP server not configured: {server_name}")


class DelegationExecFailed(DelegationError):
	"""Raised when a process target cannot start or exits non-zero."""

	def __init__(
		self,
		server_name: str,
		message: str,
		exit_code: Optional[int] = None,
		stderr: str = "",
	):
		super().__init__(server_name, message)
		self.exit_code = exit_code
		self.stderr = stderr


class DelegationTimeout(DelegationError):
	"""Raised when a delegation exceeds its deadline."""

	def __init__(self, server_name: str, timeout: float):
		super().__init__(server_name, f"Delegation to {server_name} timed out after {timeout}s")
		self.timeout = timeout


class DelegationHttpFailed(DelegationError):
	"""Raised on transport errors, non-2xx responses, or malformed bodies."""

	def __init__(
		self,
		server_name: str,
		message: str,
		status: Optional[int] = None,
		body: str = "",
	):
		super().__init__(server_name, message)
		self.status = status
		self.body = body


class HttpAuth(BaseModel):
	"""Authentication settings for an HTTP target."""
	type: Literal["bearer", "basic", "api_key"]
	token: Optional[str] = None
	username: Optional[str] = None
	password: Optional[str] = None
	api_key: Optional[str] = None
	header: str = Field(default="X-API-Key", description="Header carrying the api key")

	def headers(self) -> dict[str, str]:
		if self.type == "bearer" and self.token:
			return {"Authorization": f"Bearer {self.token}"}
		if self.type == "api_key" and self.api_key:
			return {self.header: self.api_key}
		return {}

	def basic_auth(self) -> Optional[aiohttp.BasicAuth]:
		if self.type == "basic" and self.username is not None:
			return aiohttp.BasicAuth(self.username, self.password or "")
		return None


class ProcessTarget(BaseModel):
	"""A server invoked as a local child process."""
	mode: Literal["process"] = "process"
	name: str
	command: str
	args: list[str] = Field(default_factory=list)
	env: dict[str, str] = Field(default_factory=dict)
	timeout: Optional[float] = Field(default=None, description="Seconds; overrides the delegator default")


class HttpTarget(BaseModel):
	"""A server reached with an HTTP POST."""
	mode: Literal["http"] = "http"
	name: str
	url: str
	headers: dict[str, str] = Field(default_factory=dict)
	timeout: Optional[float] = Field(default=None, description="Seconds; overrides the delegator default")
	authentication: Optional[HttpAuth] = None


DelegationTarget = Union[ProcessTarget, HttpTarget]


def resolve_target(name: str, entry: Mapping[str, Any]) -> DelegationTarget:
	"""
	Resolve one configuration entry into a target.

	Entries with a command are process targets; entries with a url
	(or endpoint) are HTTP targets.

	Raises:
		ValueError: If the entry has neither a command nor a url
	"""
	if entry.get("command"):
		return ProcessTarget(
			name=name,
			command=entry["command"],
			args=[str(a) for a in entry.get("args", [])],
			env=entry.get("env", {}),
			timeout=entry.get("timeout"),
		)

	url = entry.get("url") or entry.get("endpoint")
	if url:
		return HttpTarget(
			name=name,
			url=url,
			headers=entry.get("headers", {}),
			timeout=entry.get("timeout"),
			authentication=entry.get("authentication"),
		)

	raise ValueError(f"MCP server '{name}' needs either a command or a url")


def load_targets(servers: Mapping[str, Mapping[str, Any]]) -> dict[str, DelegationTarget]:
	"""Resolve an mcp_servers mapping, skipping entries with enabled = false."""
	targets: dict[str, DelegationTarget] = {}
	for name, entry in servers.items():
		if not entry.get("enabled", True):
			logger.debug(f"Skipping disabled MCP server {name}")
			continue
		targets[name] = resolve_target(name, entry)
	return targets


class Delegator:
	"""
	Delivers payloads to named external execution backends.

	Usage:
		delegator = Delegator.from_config(get_config())
		output = await delegator.call("echo-server", {"task": "lint"})
	"""

	def __init__(
		self,
		servers: Mapping[str, DelegationTarget],
		default_timeout: Optional[float] = None,
	):
		"""
		Initialize the delegator.

		Args:
			servers: Resolved targets keyed by server name
			default_timeout: Deadline in seconds for targets without their own;
				None means no deadline
		"""
		self.servers = dict(servers)
		self.default_timeout = default_timeout

	@classmethod
	def from_config(cls, config) -> "Delegator":
		"""Build a delegator from a loaded Config."""
		return cls(
			load_targets(config.mcp_servers),
			default_timeout=config.delegation_timeout,
		)

	def get_target(self, server_name: str) -> DelegationTarget:
		"""Look up a target or raise ServerNotFound."""
		target = self.servers.get(server_name)
		if target is None:
			logger.warning(f"Delegation failed: {server_name} (server_not_found)")
			raise ServerNotFound(server_name)
		return target

	async def call(self, server_name: str, payload: Any) -> Any:
		"""
		Call a configured server with a JSON-serializable payload.

		Args:
			server_name: Configured server name
			payload: Any JSON-serializable value

		Returns:
			Process mode: the child's stdout as a string, decoded as UTF-8;
				invalid bytes are replaced with U+FFFD.
			HTTP mode: the parsed JSON body, or the raw text for non-JSON responses.

		Raises:
			ServerNotFound: Unknown server name
			DelegationExecFailed: Process could not start or exited non-zero
			DelegationTimeout: Deadline exceeded
			DelegationHttpFailed: Transport error, non-2xx status, or malformed body
		"""
		target = self.get_target(server_name)
		timeout = target.timeout if target.timeout is not None else self.default_timeout

		try:
			if isinstance(target, ProcessTarget):
				result = await self._call_process(target, payload, timeout)
			else:
				result = await self._call_http(target, payload, timeout)
		except DelegationError as e:
			logger.warning(f"Delegation failed: {server_name} ({type(e).__name__}): {e}")
			raise

		logger.info(f"Delegation to {server_name} succeeded ({target.mode} mode)")
		return result

	async def _call_process(
		self,
		target: ProcessTarget,
		payload: Any,
		timeout: Optional[float],
	) -> str:
		"""Run the target's command, writing the payload to stdin."""
		data = json.dumps(payload).encode()
		env = {**os.environ, **target.env} if target.env else None

		try:
			proc = await asyncio.create_subprocess_exec(
				target.command,
				*target.args,
				stdin=asyncio.subprocess.PIPE,
				stdout=asyncio.subprocess.PIPE,
				stderr=asyncio.subprocess.PIPE,
				env=env,
			)
		except FileNotFoundError:
			raise DelegationExecFailed(
				target.name,
				f"Command not found: {target.command}",
			)
		except PermissionError:
			raise DelegationExecFailed(
				target.name,
				f"Permission denied running {target.command}",
			)
		except OSError as e:
			raise DelegationExecFailed(
				target.name,
				f"Could not start {target.command}: {e}",
			)

		logger.debug(f"Spawned {target.command} (pid {proc.pid}) for {target.name}")

		try:
			stdout, stderr = await asyncio.wait_for(
				proc.communicate(input=data),
				timeout=timeout,
			)
		except asyncio.TimeoutError:
			try:
				proc.kill()
			except ProcessLookupError:
				pass
			await proc.wait()
			raise DelegationTimeout(target.name, timeout)

		if proc.returncode != 0:
			err = stderr.decode(errors="replace")[-ERROR_EXCERPT_CHARS:]
			raise DelegationExecFailed(
				target.name,
				f"{target.command} exited with code {proc.returncode}",
				exit_code=proc.returncode,
				stderr=err,
			)

		try:
			return stdout.decode()
		except UnicodeDecodeError as e:
			logger.debug(f"Non-UTF-8 output from {target.name}, replacing invalid bytes: {e}")
			return stdout.decode(errors="replace")

	async def _call_http(
		self,
		target: HttpTarget,
		payload: Any,
		timeout: Optional[float],
	) -> Any:
		"""POST the payload as JSON to the target's url."""
		headers = {**target.headers, "Content-Type": "application/json"}
		auth = None
		if target.authentication:
			headers.update(target.authentication.headers())
			auth = target.authentication.basic_auth()

		try:
			async with aiohttp.ClientSession(
				timeout=aiohttp.ClientTimeout(total=timeout),
			) as session:
				async with session.post(
					target.url,
					data=json.dumps(payload),
					headers=headers,
					auth=auth,
				) as response:
					raw = await response.read()
					status = response.status
					content_type = response.content_type
					charset = response.charset or "utf-8"
		except asyncio.TimeoutError:
			raise DelegationTimeout(target.name, timeout)
		except aiohttp.ClientError as e:
			raise DelegationHttpFailed(
				target.name,
				f"Request to {target.url} failed: {e}",
			)

		try:
			body = raw.decode(charset)
		except (UnicodeDecodeError, LookupError) as e:
			if 200 <= status < 300:
				raise DelegationHttpFailed(
					target.name,
					f"Undecodable {charset} body from {target.url}: {e}",
					status=status,
				)
			body = raw.decode("utf-8", errors="replace")

		if not 200 <= status < 300:
			raise DelegationHttpFailed(
				target.name,
				f"{target.url} returned HTTP {status}",
				status=status,
				body=body[:ERROR_EXCERPT_CHARS],
			)

		if content_type == "application/json" or content_type.endswith("+json"):
			if not body.strip():
				return None
			try:
				return json.loads(body)
			except json.JSONDecodeError as e:
				raise DelegationHttpFailed(
					target.name,
					f"Malformed JSON from {target.url}: {e}",
					status=status,
					body=body[:ERROR_EXCERPT_CHARS],
				)

		return body
