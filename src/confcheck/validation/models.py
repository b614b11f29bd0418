"""Payload models for the built-in networking kinds.

Field names follow the camelCase keys used in resource files.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

_STRICT = ConfigDict(populate_by_name=True, extra="forbid")


class PortSelector(BaseModel):
    """Port on a destination host."""
    number: int = Field(ge=1, le=65535)

    model_config = _STRICT


class Destination(BaseModel):
    """Where traffic is sent."""
    host: str = Field(min_length=1)
    subset: str | None = None
    port: PortSelector | None = None

    model_config = _STRICT


class StringMatch(BaseModel):
    """Exactly one of exact, prefix or regex."""
    exact: str | None = None
    prefix: str | None = None
    regex: str | None = None

    @model_validator(mode="after")
    def check_one_of(self):
        set_fields = [v for v in (self.exact, self.prefix, self.regex) if v is not None]
        if len(set_fields) != 1:
            raise ValueError("exactly one of exact, prefix or regex must be set")
        return self

    model_config = _STRICT


class HTTPMatchRequest(BaseModel):
    """Conditions an HTTP request must meet for a route to apply."""
    name: str | None = None
    uri: StringMatch | None = None
    method: StringMatch | None = None
    headers: dict[str, StringMatch] = Field(default_factory=dict)

    model_config = _STRICT


class HTTPRouteDestination(BaseModel):
    """Weighted destination of an HTTP route."""
    destination: Destination
    weight: int | None = Field(default=None, ge=0, le=100)

    model_config = _STRICT


class Percent(BaseModel):
    value: float = Field(ge=0, le=100)

    model_config = _STRICT


class HTTPRoute(BaseModel):
    """One HTTP routing rule."""
    name: str | None = None
    match: list[HTTPMatchRequest] = Field(default_factory=list)
    route: list[HTTPRouteDestination] = Field(min_length=1)
    timeout: str | None = Field(default=None, pattern=r"^\d+(\.\d+)?(ms|s|m|h)$")
    mirror: Destination | None = None
    mirror_percent: int | None = Field(
        alias="mirrorPercent", default=None, ge=0, le=100,
        deprecated="use mirrorPercentage instead",
    )
    mirror_percentage: Percent | None = Field(alias="mirrorPercentage", default=None)

    @model_validator(mode="after")
    def check_weights(self):
        if len(self.route) > 1:
            total = sum(d.weight or 0 for d in self.route)
            if total != 100:
                raise ValueError(f"total destination weight {total} != 100")
        return self

    model_config = _STRICT


class VirtualService(BaseModel):
    """Routing rules for a set of hosts."""
    hosts: list[str] = Field(min_length=1)
    gateways: list[str] = Field(default_factory=list)
    http: list[HTTPRoute] = Field(default_factory=list)
    export_to: list[str] = Field(alias="exportTo", default_factory=list)

    @field_validator("hosts")
    @classmethod
    def validate_hosts(cls, v):
        for host in v:
            if not host or " " in host:
                raise ValueError(f"invalid host: {host!r}")
        return v

    model_config = _STRICT


class LoadBalancerSettings(BaseModel):
    simple: Literal["ROUND_ROBIN", "LEAST_REQUEST", "RANDOM", "PASSTHROUGH"] = "ROUND_ROBIN"

    model_config = _STRICT


class ClientTLSSettings(BaseModel):
    mode: Literal["DISABLE", "SIMPLE", "MUTUAL", "ISTIO_MUTUAL"] = "DISABLE"
    sni: str | None = None

    model_config = _STRICT


class TrafficPolicy(BaseModel):
    load_balancer: LoadBalancerSettings | None = Field(alias="loadBalancer", default=None)
    tls: ClientTLSSettings | None = None

    model_config = _STRICT


class Subset(BaseModel):
    """Named group of endpoints of a host."""
    name: str = Field(min_length=1)
    labels: dict[str, str] = Field(default_factory=dict)
    traffic_policy: TrafficPolicy | None = Field(alias="trafficPolicy", default=None)

    model_config = _STRICT


class DestinationRule(BaseModel):
    """Policies applied to traffic after routing."""
    host: str = Field(min_length=1)
    traffic_policy: TrafficPolicy | None = Field(alias="trafficPolicy", default=None)
    subsets: list[Subset] = Field(default_factory=list)
    export_to: list[str] = Field(alias="exportTo", default_factory=list)

    @field_validator("subsets")
    @classmethod
    def validate_unique_subsets(cls, v):
        seen = set()
        for subset in v:
            if subset.name in seen:
                raise ValueError(f"duplicate subset name: {subset.name}")
            seen.add(subset.name)
        return v

    model_config = _STRICT


class Port(BaseModel):
    number: int = Field(ge=1, le=65535)
    protocol: Literal["HTTP", "HTTPS", "GRPC", "HTTP2", "MONGO", "TCP", "TLS"]
    name: str = Field(min_length=1)

    model_config = _STRICT


class ServerTLSSettings(BaseModel):
    mode: Literal["PASSTHROUGH", "SIMPLE", "MUTUAL", "AUTO_PASSTHROUGH", "ISTIO_MUTUAL"] = "SIMPLE"
    credential_name: str | None = Field(alias="credentialName", default=None)

    model_config = _STRICT


class Server(BaseModel):
    """One listener of a gateway."""
    port: Port
    hosts: list[str] = Field(min_length=1)
    tls: ServerTLSSettings | None = None
    name: str | None = None

    @model_validator(mode="after")
    def check_tls(self):
        if self.port.protocol in ("HTTPS", "TLS") and self.tls is None:
            raise ValueError(f"server with protocol {self.port.protocol} must set tls")
        return self

    model_config = _STRICT


class Gateway(BaseModel):
    """Load balancer at the edge of the mesh."""
    selector: dict[str, str] = Field(default_factory=dict)
    servers: list[Server] = Field(min_length=1)

    model_config = _STRICT


class ServicePort(BaseModel):
    number: int = Field(ge=1, le=65535)
    protocol: str | None = None
    name: str = Field(min_length=1)
    target_port: int | None = Field(alias="targetPort", default=None, ge=1, le=65535)

    model_config = _STRICT


class WorkloadEntry(BaseModel):
    address: str = Field(min_length=1)
    ports: dict[str, int] = Field(default_factory=dict)
    labels: dict[str, str] = Field(default_factory=dict)

    model_config = _STRICT


class ServiceEntry(BaseModel):
    """Entry added to the mesh's service registry."""
    hosts: list[str] = Field(min_length=1)
    addresses: list[str] = Field(default_factory=list)
    ports: list[ServicePort] = Field(default_factory=list)
    location: Literal["MESH_EXTERNAL", "MESH_INTERNAL"] = "MESH_EXTERNAL"
    resolution: Literal["NONE", "STATIC", "DNS", "DNS_ROUND_ROBIN"] = "NONE"
    endpoints: list[WorkloadEntry] = Field(default_factory=list)
    export_to: list[str] = Field(alias="exportTo", default_factory=list)

    @model_validator(mode="after")
    def check_static_endpoints(self):
        if self.resolution == "STATIC" and not self.endpoints:
            raise ValueError("STATIC resolution requires at least one endpoint")
        return self

    model_config = _STRICT
