"""Builtin type registry.

Names in this registry are treated as library or platform provided. The
closure resolver never uses them as expansion anchors, so a reference to
``String`` or ``View`` does not drag in every extension of those types.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Collection, Iterable

_SWIFT_STDLIB = {
    "Any",
    "AnyHashable",
    "AnyObject",
    "Array",
    "ArraySlice",
    "Bool",
    "Character",
    "ClosedRange",
    "Codable",
    "Collection",
    "Comparable",
    "ContiguousArray",
    "CustomDebugStringConvertible",
    "CustomStringConvertible",
    "Decodable",
    "Decoder",
    "Dictionary",
    "Double",
    "Encodable",
    "Encoder",
    "Equatable",
    "Error",
    "Float",
    "Hashable",
    "Hasher",
    "Identifiable",
    "Int",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "IteratorProtocol",
    "KeyPath",
    "Never",
    "Optional",
    "Range",
    "RandomAccessCollection",
    "RawRepresentable",
    "Result",
    "Self",
    "Sendable",
    "Sequence",
    "Set",
    "String",
    "StringProtocol",
    "Substring",
    "Task",
    "UInt",
    "UInt8",
    "UInt16",
    "UInt32",
    "UInt64",
    "Void",
    "WritableKeyPath",
    "MainActor",
    "AsyncStream",
    "AsyncSequence",
    "CaseIterable",
    "OptionSet",
}

_FOUNDATION = {
    "Bundle",
    "CGFloat",
    "CGPoint",
    "CGRect",
    "CGSize",
    "Calendar",
    "Data",
    "Date",
    "DateComponents",
    "DateFormatter",
    "DispatchQueue",
    "FileManager",
    "JSONDecoder",
    "JSONEncoder",
    "Locale",
    "Measurement",
    "NSObject",
    "Notification",
    "NotificationCenter",
    "NumberFormatter",
    "ProcessInfo",
    "Timer",
    "TimeInterval",
    "TimeZone",
    "URL",
    "URLRequest",
    "URLSession",
    "UUID",
    "UserDefaults",
}

_SWIFTUI = {
    "Alert",
    "AnyView",
    "App",
    "AppStorage",
    "Binding",
    "Button",
    "ButtonStyle",
    "Capsule",
    "Circle",
    "Color",
    "Divider",
    "EdgeInsets",
    "EmptyView",
    "Environment",
    "EnvironmentObject",
    "EnvironmentValues",
    "ForEach",
    "Form",
    "Font",
    "GeometryProxy",
    "GeometryReader",
    "Grid",
    "GridItem",
    "Group",
    "HStack",
    "Image",
    "LazyHGrid",
    "LazyHStack",
    "LazyVGrid",
    "LazyVStack",
    "Label",
    "LinearGradient",
    "List",
    "Menu",
    "NavigationLink",
    "NavigationSplitView",
    "NavigationStack",
    "NavigationView",
    "ObservableObject",
    "ObservedObject",
    "Picker",
    "Preview",
    "PreviewProvider",
    "ProgressView",
    "Published",
    "Rectangle",
    "RoundedRectangle",
    "Scene",
    "ScrollView",
    "Section",
    "SecureField",
    "Slider",
    "Spacer",
    "State",
    "StateObject",
    "Stepper",
    "TabView",
    "Text",
    "TextField",
    "Toggle",
    "View",
    "ViewBuilder",
    "ViewModifier",
    "VStack",
    "WindowGroup",
    "ZStack",
    "Bindable",
    "Observable",
    "ObservationIgnored",
    "ScenePhase",
    "ToolbarItem",
    "ToolbarItemPlacement",
    "Animation",
    "Edge",
    "HorizontalAlignment",
    "VerticalAlignment",
    "Alignment",
    "ContentMode",
    "ShapeStyle",
    "Shape",
    "Path",
    "Angle",
    "UnitPoint",
    "Gradient",
    "Namespace",
    "FocusState",
}

_PLATFORM = {
    "AnyCancellable",
    "AnyPublisher",
    "CurrentValueSubject",
    "PassthroughSubject",
    "Published",
    "NSApplication",
    "NSView",
    "NSViewController",
    "NSViewRepresentable",
    "UIApplication",
    "UIColor",
    "UIFont",
    "UIImage",
    "UIView",
    "UIViewController",
    "UIViewControllerRepresentable",
    "UIViewRepresentable",
}

BUILTIN_TYPES: frozenset[str] = frozenset(
    _SWIFT_STDLIB | _FOUNDATION | _SWIFTUI | _PLATFORM
)


def is_builtin_type(name: str, extra: Collection[str] | None = None) -> bool:
    """Return True when ``name`` is library/platform provided.

    ``extra`` adds project-specific names on top of the defaults; it never
    removes a default entry.
    """
    if name in BUILTIN_TYPES:
        return True
    return extra is not None and name in extra


def build_builtin_predicate(
    extra: Iterable[str] | None = None,
) -> Callable[[str], bool]:
    """Return a ``name -> bool`` predicate bound to one set of extra names."""
    extra_names = frozenset(extra or ())

    def _is_builtin(name: str) -> bool:
        return is_builtin_type(name, extra_names)

    return _is_builtin


__all__ = ["BUILTIN_TYPES", "build_builtin_predicate", "is_builtin_type"]
