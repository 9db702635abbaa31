"""DevTools protocol bindings.

Generated by ``python -m devtools_core.codegen``.  Do not edit by hand.
"""

from __future__ import annotations

import enum
from typing import Any, ClassVar, Literal, Protocol, Union

from pydantic import Field

from devtools_core.cdp_client import DevToolsClient
from devtools_core.models import (
    EventRegistry,
    Nothing,
    ProtocolEvent,
    ProtocolModel,
    RequestModel,
)
from devtools_core.protocol import DEFAULT_HOST, DEFAULT_PORT


class Inspector:
    """Types of the Inspector domain."""


class Network:
    """Network domain allows tracking network activities of the page."""

    LoaderId = str
    """Unique loader identifier."""

    RequestId = str
    """Unique request identifier."""

    MonotonicTime = float
    """Monotonically increasing time in seconds since an arbitrary point in the past."""

    Headers = Any
    """Request / response headers as keys / values of JSON object."""

    class _EnableRequest(RequestModel):
        max_total_buffer_size: int | None = Field(default=None, alias="maxTotalBufferSize")
        """Buffer size in bytes to use when preserving network payloads (XHRs, etc)."""

        max_resource_buffer_size: int | None = Field(default=None, alias="maxResourceBufferSize")
        """Per-resource buffer size in bytes to use when preserving network payloads (XHRs, etc)."""


class Page:
    """Actions and events related to the inspected page belong to the page domain."""

    FrameId = str
    """Unique frame identifier."""

    class ResourceType(str, enum.Enum):
        """Resource type as it was perceived by the rendering engine."""
        DOCUMENT = "Document"
        STYLESHEET = "Stylesheet"
        IMAGE = "Image"
        SCRIPT = "Script"
        XHR = "XHR"
        FETCH = "Fetch"
        WEB_SOCKET = "WebSocket"
        OTHER = "Other"

    class TransitionType(str, enum.Enum):
        """Transition type."""
        LINK = "link"
        TYPED = "typed"
        ADDRESS_BAR = "address_bar"
        AUTO_BOOKMARK = "auto_bookmark"
        RELOAD = "reload"
        OTHER = "other"

    class Frame(ProtocolModel):
        """Information about the Frame on the page."""

        id: Page.FrameId
        """Frame unique identifier."""

        parent_id: Page.FrameId | None = Field(default=None, alias="parentId")
        """Parent frame identifier."""

        loader_id: Network.LoaderId = Field(alias="loaderId")
        """Identifier of the loader associated with this frame."""

        url: str
        """Frame document's URL without fragment."""

        mime_type: str = Field(alias="mimeType")
        """Frame document's mimeType as determined by the browser."""

    class NavigateReturn(ProtocolModel):
        """Result of ``Page.navigate``."""

        frame_id: Page.FrameId = Field(alias="frameId")
        """Frame id that has navigated (or failed to navigate)"""

        loader_id: Network.LoaderId | None = Field(default=None, alias="loaderId")
        """Loader identifier. This is omitted in case of same-document navigation."""

        error_text: str | None = Field(default=None, alias="errorText")
        """User friendly error message, present if and only if navigation has failed."""

    class _NavigateRequest(RequestModel):
        url: str
        """URL to navigate the page to."""

        referrer: str | None = None
        """Referrer URL."""

        transition_type: Page.TransitionType | None = Field(default=None, alias="transitionType")
        """Intended transition type."""

    class _ReloadRequest(RequestModel):
        ignore_cache: bool | None = Field(default=None, alias="ignoreCache")
        """If true, browser cache is ignored (as if the user pressed Shift+refresh)."""


class DOM:
    """This domain exposes DOM read/write operations."""

    NodeId = int
    """Unique DOM node identifier."""

    class PseudoType(str, enum.Enum):
        """Pseudo element type."""
        FIRST_LINE = "first-line"
        FIRST_LETTER = "first-letter"
        BEFORE = "before"
        AFTER = "after"
        BACKDROP = "backdrop"

    class Node(ProtocolModel):
        """DOM interaction is implemented in terms of mirror objects that represent the actual DOM nodes."""

        node_id: DOM.NodeId = Field(alias="nodeId")
        """Node identifier that is passed into the rest of the DOM messages as the `nodeId`."""

        parent_id: DOM.NodeId | None = Field(default=None, alias="parentId")
        """The id of the parent node if any."""

        node_type: int = Field(alias="nodeType")
        """`Node`'s nodeType."""

        node_name: str = Field(alias="nodeName")
        """`Node`'s nodeName."""

        child_node_count: int | None = Field(default=None, alias="childNodeCount")
        """Child count for `Container` nodes."""

        children: list[DOM.Node] | None = None
        """Child nodes of this node when requested with children."""

        attributes: list[str] | None = None
        """Attributes of the `Element` node in the form of flat array `[name1, value1, name2, value2]`."""

        frame_id: Page.FrameId | None = Field(default=None, alias="frameId")
        """Frame ID for frame owner elements."""

        content_document: DOM.Node | None = Field(default=None, alias="contentDocument")
        """Content document for frame owner elements."""

        pseudo_type: DOM.PseudoType | None = Field(default=None, alias="pseudoType")
        """Pseudo element type for this node."""

    class GetDocumentReturn(ProtocolModel):
        """Result of ``DOM.getDocument``."""

        root: DOM.Node
        """Resulting node."""

    class _GetDocumentRequest(RequestModel):
        depth: int | None = None
        """The maximum depth at which children should be retrieved, defaults to 1."""

        pierce: bool | None = None
        """Whether or not iframes and shadow roots should be traversed when returning the subtree."""

    class QuerySelectorReturn(ProtocolModel):
        """Result of ``DOM.querySelector``."""

        node_id: DOM.NodeId = Field(alias="nodeId")
        """Query selector result."""

    class _QuerySelectorRequest(RequestModel):
        node_id: DOM.NodeId = Field(alias="nodeId")
        """Id of the node to query upon."""

        selector: str
        """Selector string."""


class Runtime:
    """Runtime domain exposes JavaScript runtime by means of remote evaluation and mirror objects."""

    RemoteObjectId = str
    """Unique object identifier."""

    ExecutionContextId = int
    """Id of an execution context."""

    class RemoteObject(ProtocolModel):
        """Mirror object referencing original JavaScript object."""

        type: Literal["object", "function", "undefined", "string", "number", "boolean", "symbol", "bigint"]
        """Object type."""

        class_name: str | None = Field(default=None, alias="className")
        """Object class (constructor) name."""

        value: Any | None = None
        """Remote object value in case of primitive values or JSON values (if it was requested)."""

        description: str | None = None
        """String representation of the object."""

        object_id: Runtime.RemoteObjectId | None = Field(default=None, alias="objectId")
        """Unique object identifier (for non-primitive values)."""

    class EvaluateReturn(ProtocolModel):
        """Result of ``Runtime.evaluate``."""

        result: Runtime.RemoteObject
        """Evaluation result."""

        exception_details: Any | None = Field(default=None, alias="exceptionDetails")
        """Exception details."""

    class _EvaluateRequest(RequestModel):
        expression: str
        """Expression to evaluate."""

        context_id: Runtime.ExecutionContextId | None = Field(default=None, alias="contextId")
        """Specifies in which execution context to perform evaluation."""

        return_by_value: bool | None = Field(default=None, alias="returnByValue")
        """Whether the result is expected to be a JSON object that should be sent by value."""


class InspectorApi(Protocol):
    """Commands of the Inspector domain."""

    def disable(self) -> Nothing:
        """Disables inspector domain notifications."""
        ...

    def enable(self) -> Nothing:
        """Enables inspector domain notifications."""
        ...


class InspectorCommands(InspectorApi):
    """:class:`InspectorApi` bound to a :class:`DevToolsClient`."""

    def __init__(self, client: DevToolsClient) -> None:
        self._client = client

    def disable(self) -> Nothing:
        return self._client.invoke(
            "Inspector.disable",
            None,
            Nothing,
        )

    def enable(self) -> Nothing:
        return self._client.invoke(
            "Inspector.enable",
            None,
            Nothing,
        )


class NetworkApi(Protocol):
    """Commands of the Network domain."""

    def disable(self) -> Nothing:
        """Disables network tracking, prevents network events from being sent to the client."""
        ...

    def enable(
        self,
        max_total_buffer_size: int | None = None,
        max_resource_buffer_size: int | None = None,
    ) -> Nothing:
        """Enables network tracking, network events will now be delivered to the client."""
        ...


class NetworkCommands(NetworkApi):
    """:class:`NetworkApi` bound to a :class:`DevToolsClient`."""

    def __init__(self, client: DevToolsClient) -> None:
        self._client = client

    def disable(self) -> Nothing:
        return self._client.invoke(
            "Network.disable",
            None,
            Nothing,
        )

    def enable(
        self,
        max_total_buffer_size: int | None = None,
        max_resource_buffer_size: int | None = None,
    ) -> Nothing:
        return self._client.invoke(
            "Network.enable",
            Network._EnableRequest(max_total_buffer_size=max_total_buffer_size, max_resource_buffer_size=max_resource_buffer_size),
            Nothing,
        )


class PageApi(Protocol):
    """Commands of the Page domain."""

    def enable(self) -> Nothing:
        """Enables page domain notifications."""
        ...

    def navigate(
        self,
        url: str,
        referrer: str | None = None,
        transition_type: Page.TransitionType | None = None,
    ) -> Page.NavigateReturn:
        """Navigates current page to the given URL."""
        ...

    def reload(self, ignore_cache: bool | None = None) -> Nothing:
        """Reloads given page optionally ignoring the cache."""
        ...


class PageCommands(PageApi):
    """:class:`PageApi` bound to a :class:`DevToolsClient`."""

    def __init__(self, client: DevToolsClient) -> None:
        self._client = client

    def enable(self) -> Nothing:
        return self._client.invoke(
            "Page.enable",
            None,
            Nothing,
        )

    def navigate(
        self,
        url: str,
        referrer: str | None = None,
        transition_type: Page.TransitionType | None = None,
    ) -> Page.NavigateReturn:
        return self._client.invoke(
            "Page.navigate",
            Page._NavigateRequest(url=url, referrer=referrer, transition_type=transition_type),
            Page.NavigateReturn,
        )

    def reload(self, ignore_cache: bool | None = None) -> Nothing:
        return self._client.invoke(
            "Page.reload",
            Page._ReloadRequest(ignore_cache=ignore_cache),
            Nothing,
        )


class DOMApi(Protocol):
    """Commands of the DOM domain."""

    def enable(self) -> Nothing:
        """Enables DOM agent for the given page."""
        ...

    def get_document(
        self,
        depth: int | None = None,
        pierce: bool | None = None,
    ) -> DOM.GetDocumentReturn:
        """Returns the root DOM node (and optionally the subtree) to the caller."""
        ...

    def query_selector(
        self,
        node_id: DOM.NodeId,
        selector: str,
    ) -> DOM.QuerySelectorReturn:
        """Executes `querySelector` on a given node."""
        ...


class DOMCommands(DOMApi):
    """:class:`DOMApi` bound to a :class:`DevToolsClient`."""

    def __init__(self, client: DevToolsClient) -> None:
        self._client = client

    def enable(self) -> Nothing:
        return self._client.invoke(
            "DOM.enable",
            None,
            Nothing,
        )

    def get_document(
        self,
        depth: int | None = None,
        pierce: bool | None = None,
    ) -> DOM.GetDocumentReturn:
        return self._client.invoke(
            "DOM.getDocument",
            DOM._GetDocumentRequest(depth=depth, pierce=pierce),
            DOM.GetDocumentReturn,
        )

    def query_selector(
        self,
        node_id: DOM.NodeId,
        selector: str,
    ) -> DOM.QuerySelectorReturn:
        return self._client.invoke(
            "DOM.querySelector",
            DOM._QuerySelectorRequest(node_id=node_id, selector=selector),
            DOM.QuerySelectorReturn,
        )


class RuntimeApi(Protocol):
    """Commands of the Runtime domain."""

    def enable(self) -> Nothing:
        """Enables reporting of execution contexts creation."""
        ...

    def evaluate(
        self,
        expression: str,
        context_id: Runtime.ExecutionContextId | None = None,
        return_by_value: bool | None = None,
    ) -> Runtime.EvaluateReturn:
        """Evaluates expression on global object."""
        ...


class RuntimeCommands(RuntimeApi):
    """:class:`RuntimeApi` bound to a :class:`DevToolsClient`."""

    def __init__(self, client: DevToolsClient) -> None:
        self._client = client

    def enable(self) -> Nothing:
        return self._client.invoke(
            "Runtime.enable",
            None,
            Nothing,
        )

    def evaluate(
        self,
        expression: str,
        context_id: Runtime.ExecutionContextId | None = None,
        return_by_value: bool | None = None,
    ) -> Runtime.EvaluateReturn:
        return self._client.invoke(
            "Runtime.evaluate",
            Runtime._EvaluateRequest(expression=expression, context_id=context_id, return_by_value=return_by_value),
            Runtime.EvaluateReturn,
        )


class InspectorDetached(ProtocolEvent):
    """Fired when remote debugging connection is about to be terminated. Contains detach reason."""

    METHOD: ClassVar[str] = "Inspector.detached"

    reason: str
    """The reason why connection has been terminated."""


class InspectorTargetCrashed(ProtocolEvent):
    """Fired when debugging target has crashed"""

    METHOD: ClassVar[str] = "Inspector.targetCrashed"


class NetworkRequestWillBeSent(ProtocolEvent):
    """Fired when page is about to send HTTP request."""

    METHOD: ClassVar[str] = "Network.requestWillBeSent"

    request_id: Network.RequestId = Field(alias="requestId")
    """Request identifier."""

    loader_id: Network.LoaderId = Field(alias="loaderId")
    """Loader identifier. Empty string if the request is fetched from worker."""

    document_url: str = Field(alias="documentURL")
    """URL of the document this request is loaded for."""

    timestamp: Network.MonotonicTime
    """Timestamp."""

    type: Page.ResourceType | None = None
    """Type of this resource."""


class PageDomContentEventFired(ProtocolEvent):
    METHOD: ClassVar[str] = "Page.domContentEventFired"

    timestamp: Network.MonotonicTime


class PageFrameNavigated(ProtocolEvent):
    """Fired once navigation of the frame has completed."""

    METHOD: ClassVar[str] = "Page.frameNavigated"

    frame: Page.Frame
    """Frame object."""


class PageLoadEventFired(ProtocolEvent):
    METHOD: ClassVar[str] = "Page.loadEventFired"

    timestamp: Network.MonotonicTime


class PageFrameResized(ProtocolEvent):
    METHOD: ClassVar[str] = "Page.frameResized"


class DOMDocumentUpdated(ProtocolEvent):
    """Fired when `Document` has been totally updated. Node ids are no longer valid."""

    METHOD: ClassVar[str] = "DOM.documentUpdated"


class DOMSetChildNodes(ProtocolEvent):
    """Fired when backend wants to provide client with the missing DOM structure."""

    METHOD: ClassVar[str] = "DOM.setChildNodes"

    parent_id: DOM.NodeId = Field(alias="parentId")
    """Parent node id to populate with children."""

    nodes: list[DOM.Node]
    """Child nodes array."""


class RuntimeExecutionContextDestroyed(ProtocolEvent):
    """Issued when execution context is destroyed."""

    METHOD: ClassVar[str] = "Runtime.executionContextDestroyed"

    execution_context_id: Runtime.ExecutionContextId = Field(alias="executionContextId")
    """Id of the destroyed context"""


Event = Union[
    InspectorDetached,
    InspectorTargetCrashed,
    NetworkRequestWillBeSent,
    PageDomContentEventFired,
    PageFrameNavigated,
    PageLoadEventFired,
    PageFrameResized,
    DOMDocumentUpdated,
    DOMSetChildNodes,
    RuntimeExecutionContextDestroyed,
]
"""Any event the browser may push."""

EVENTS = EventRegistry(
    [
        InspectorDetached,
        InspectorTargetCrashed,
        NetworkRequestWillBeSent,
        PageDomContentEventFired,
        PageFrameNavigated,
        PageLoadEventFired,
        PageFrameResized,
        DOMDocumentUpdated,
        DOMSetChildNodes,
        RuntimeExecutionContextDestroyed,
    ]
)
"""Event variants keyed by their wire tag."""


class DevTools:
    """Every domain bound to one :class:`DevToolsClient`."""

    def __init__(self, client: DevToolsClient) -> None:
        self.client = client
        self.inspector = InspectorCommands(client)
        self.network = NetworkCommands(client)
        self.page = PageCommands(client)
        self.dom = DOMCommands(client)
        self.runtime = RuntimeCommands(client)

    @classmethod
    def connect(cls, port: int = DEFAULT_PORT, host: str = DEFAULT_HOST) -> DevTools:
        """Discover the first target and bind a typed client to it."""
        return cls(DevToolsClient.connect(port, host, events=EVENTS))


Network._EnableRequest.model_rebuild()
Page.Frame.model_rebuild()
Page.NavigateReturn.model_rebuild()
Page._NavigateRequest.model_rebuild()
Page._ReloadRequest.model_rebuild()
DOM.Node.model_rebuild()
DOM.GetDocumentReturn.model_rebuild()
DOM._GetDocumentRequest.model_rebuild()
DOM.QuerySelectorReturn.model_rebuild()
DOM._QuerySelectorRequest.model_rebuild()
Runtime.RemoteObject.model_rebuild()
Runtime.EvaluateReturn.model_rebuild()
Runtime._EvaluateRequest.model_rebuild()
InspectorDetached.model_rebuild()
InspectorTargetCrashed.model_rebuild()
NetworkRequestWillBeSent.model_rebuild()
PageDomContentEventFired.model_rebuild()
PageFrameNavigated.model_rebuild()
PageLoadEventFired.model_rebuild()
PageFrameResized.model_rebuild()
DOMDocumentUpdated.model_rebuild()
DOMSetChildNodes.model_rebuild()
RuntimeExecutionContextDestroyed.model_rebuild()
