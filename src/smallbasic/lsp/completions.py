"""
Completion item providers for Small Basic LSP.

This module provides completions for:
- Keywords
- Built-in library objects and their members (after a dot)
- Variables and subroutines defined in the current document
"""

import re
from typing import Any

from lsprotocol import types

from smallbasic.config import Settings
from smallbasic.lsp.symbols import SymbolTable

KEYWORDS = [
    "If", "Then", "Else", "ElseIf", "EndIf", "While", "EndWhile",
    "For", "To", "Step", "EndFor", "Sub", "EndSub", "Goto", "And", "Or", "Not",
]  # fmt: skip

# Built-in library objects and their members
OBJECTS: dict[str, list[str]] = {
    "Array": [
        "ContainsIndex", "ContainsValue", "GetAllIndices", "GetItemCount",
        "GetValue", "IsArray", "RemoveValue", "SetValue",
    ],
    "Clock": [
        "Date", "Day", "ElapsedMilliseconds", "Hour", "Millisecond", "Minute",
        "Month", "Second", "Time", "TimeZone", "WeekDay", "Year",
    ],
    "Controls": [
        "AddButton", "AddMultiLineTextBox", "AddTextBox", "ButtonClicked",
        "GetButtonCaption", "GetTextBoxText", "HideControl", "LastClickedButton",
        "Remove", "SetButtonCaption", "SetSize", "SetTextBoxText", "ShowControl",
    ],
    "Desktop": ["Height", "Width"],
    "Dictionary": [
        "AddValue", "ContainsKey", "ContainsValue", "GetItemCount",
        "GetKeys", "GetValue", "RemoveValue",
    ],
    "File": [
        "AppendContents", "CopyFile", "CreateDirectory", "DeleteDirectory",
        "DeleteFile", "GetDirectories", "GetFiles", "GetSettingsFilePath",
        "GetTemporaryFilePath", "InsertLine", "ReadContents", "ReadLine",
        "WriteContents", "WriteLine",
    ],
    "Flickr": ["GetPictureOfMoment", "GetRandomPicture", "GetRandomPictureOfPlace"],
    "GraphicsWindow": [
        "BackgroundColor", "BrushColor", "CanResize", "Clear", "DrawBoundText",
        "DrawEllipse", "DrawImage", "DrawLine", "DrawRectangle", "DrawResizedImage",
        "DrawText", "DrawTriangle", "FillEllipse", "FillRectangle", "FillTriangle",
        "FontBold", "FontItalic", "FontName", "FontSize", "GetColorFromRGB",
        "GetLeft", "GetPixel", "GetRandomColor", "GetTop", "Height",
        "Hide", "KeyDown", "KeyUp", "LastKey", "Left",
        "MouseDown", "MouseMove", "MouseUp", "MouseX", "MouseY",
        "PenColor", "PenWidth", "SetPixel", "Show", "ShowMessage",
        "Title", "Top", "Width",
    ],
    "ImageList": ["GetHeightOfImage", "GetWidthOfImage", "LoadImage"],
    "Math": [
        "Abs", "Ceiling", "Cos", "Floor", "GetDegrees",
        "GetRadians", "GetRandomNumber", "Max", "Min", "NaturalLog",
        "Pi", "Power", "Remainder", "Round", "Sin",
        "SquareRoot", "Tan",
    ],
    "Mouse": [
        "ButtonDown", "ButtonUp", "HideCursor", "IsLeftButtonDown",
        "IsMiddleButtonDown", "IsRightButtonDown", "MouseX", "MouseY",
        "ShowCursor", "WheelDelta", "WheelDown", "WheelUp",
    ],
    "Network": ["DownloadFile", "DownloadImage", "GetWebPageContents", "IsConnected"],
    "Program": ["Delay", "Directory", "End", "GetArgument", "Pause", "SetArgument"],
    "Shapes": [
        "AddEllipse", "AddImage", "AddLine", "AddRectangle", "AddText",
        "AddTriangle", "Animate", "GetLeft", "GetOpacity", "GetTop",
        "GetX", "GetY", "HideShape", "Move", "Remove", "Resize",
        "Rotate", "SetOpacity", "SetText", "ShowShape", "Zoom",
    ],
    "Sound": [
        "Play", "PlayAndWait", "PlayBackgroundSound", "PlayBellRing", "PlayChime",
        "PlayClick", "PlayChimes", "PlayMusic", "PlayMusicAndWait", "PlaySystemSound",
        "StopBackgroundSound",
    ],
    "Stack": ["GetCount", "PopValue", "PushValue"],
    "Text": [
        "Append", "ConvertToLowerCase", "ConvertToUpperCase", "EndsWith",
        "GetCharacter", "GetCharacterCode", "GetIndexOf", "GetLength",
        "GetSubText", "GetSubTextToEnd", "IsSubText", "StartsWith",
    ],
    "TextWindow": [
        "BackgroundColor", "Clear", "CursorLeft", "CursorTop", "ForegroundColor",
        "Hide", "Pause", "PauseIfVisible", "PauseWithoutMessage", "Read",
        "ReadKey", "ReadNumber", "ReadLine", "Show", "Title", "Write",
        "WriteLine",
    ],
    "Timer": ["Interval", "Pause", "Resume", "Tick"],
    "Turtle": [
        "Angle", "Distance", "Hide", "Move", "MoveTo",
        "PenDown", "PenUp", "Show", "Speed", "Turn",
        "TurnLeft", "TurnRight", "X", "Y",
    ],
}  # fmt: skip

KEYWORD_DOCS = {
    "If": "Starts a conditional statement. Format: If [condition] Then",
    "Then": "Used with If to execute code when condition is true",
    "Else": "Used with If to provide alternative code when condition is false",
    "ElseIf": "Used with If to check additional conditions",
    "EndIf": "Ends an If statement block",
    "While": "Starts a while loop. Format: While [condition]",
    "EndWhile": "Ends a while loop",
    "For": "Starts a for loop. Format: For [variable] = [start] To [end] [Step [increment]]",
    "To": "Used with For to specify the upper bound",
    "Step": "Used with For to specify the increment value",
    "EndFor": "Ends a for loop",
    "Sub": "Defines a subroutine. Format: Sub [name]",
    "EndSub": "Ends a subroutine definition",
    "Goto": "Jumps to a label in the code",
    "And": "Logical AND operator for combining conditions",
    "Or": "Logical OR operator for combining conditions",
}

OBJECT_DOCS = {
    "GraphicsWindow": "Provides methods for creating and manipulating graphics",
    "TextWindow": "Provides methods for console input and output",
    "Math": "Provides mathematical functions and operations",
    "Array": "Provides methods to work with arrays",
    "Program": "Provides program control functions",
    "Clock": "Provides access to date and time information",
    "Shapes": "Provides methods to create and manipulate shapes",
    "File": "Provides file system operations",
    "Text": "Provides methods for text manipulation and processing",
    "Mouse": "Provides access to mouse input and cursor control",
    "Network": "Provides methods for network operations",
    "Sound": "Provides methods for playing sounds and music",
    "Turtle": "Provides methods for turtle graphics",
    "Timer": "Provides timer functionality",
    "Controls": "Provides methods for creating user interface controls",
    "Stack": "Provides methods for stack operations",
    "Dictionary": "Provides methods for key-value pair collections",
    "ImageList": "Provides methods for working with images",
    "Desktop": "Provides information about the desktop",
    "Flickr": "Provides access to Flickr images",
}

MEMBER_DOCS: dict[str, dict[str, str]] = {
    "TextWindow": {
        "Clear": "Clears the text window. Usage: TextWindow.Clear()",
        "Pause": "Waits for the user to press a key. Usage: TextWindow.Pause()",
        "Read": "Reads a line of text from the console. Usage: var = TextWindow.Read()",
        "ReadNumber": "Reads a number from the console. Usage: num = TextWindow.ReadNumber()",
        "Title": "Sets or gets the title of the text window. Usage: TextWindow.Title = \"title\"",
        "Write": "Writes text without a new line. Usage: TextWindow.Write(text)",
        "WriteLine": "Writes text with a new line. Usage: TextWindow.WriteLine(text)",
    },
    "GraphicsWindow": {
        "BackgroundColor": "Sets or gets the background color. Usage: GraphicsWindow.BackgroundColor = \"color\"",
        "BrushColor": "Sets or gets the brush color used for filling shapes. Usage: GraphicsWindow.BrushColor = \"color\"",
        "Clear": "Clears the graphics window. Usage: GraphicsWindow.Clear()",
        "DrawEllipse": "Draws an ellipse. Usage: GraphicsWindow.DrawEllipse(x, y, width, height)",
        "DrawLine": "Draws a line between two points. Usage: GraphicsWindow.DrawLine(x1, y1, x2, y2)",
        "DrawRectangle": "Draws a rectangle. Usage: GraphicsWindow.DrawRectangle(x, y, width, height)",
        "DrawText": "Draws text at specified position. Usage: GraphicsWindow.DrawText(x, y, text)",
        "FillEllipse": "Draws a filled ellipse. Usage: GraphicsWindow.FillEllipse(x, y, width, height)",
        "FillRectangle": "Draws a filled rectangle. Usage: GraphicsWindow.FillRectangle(x, y, width, height)",
        "Height": "Sets or gets the height of the window. Usage: GraphicsWindow.Height = height",
        "PenColor": "Sets or gets the pen color. Usage: GraphicsWindow.PenColor = \"color\"",
        "ShowMessage": "Shows a message box. Usage: GraphicsWindow.ShowMessage(text, title)",
        "Width": "Sets or gets the width of the window. Usage: GraphicsWindow.Width = width",
    },
    "Math": {
        "Abs": "Returns the absolute value of a number. Usage: result = Math.Abs(number)",
        "GetRandomNumber": "Returns a random number up to a maximum value. Usage: number = Math.GetRandomNumber(max)",
        "Max": "Returns the larger of two numbers. Usage: max = Math.Max(number1, number2)",
        "Min": "Returns the smaller of two numbers. Usage: min = Math.Min(number1, number2)",
        "Pi": "Returns the value of Pi. Usage: pi = Math.Pi",
        "Power": "Returns a number raised to a power. Usage: result = Math.Power(number, power)",
        "Remainder": "Returns the remainder of a division. Usage: remainder = Math.Remainder(dividend, divisor)",
        "Round": "Rounds a number to the nearest integer. Usage: result = Math.Round(number)",
        "SquareRoot": "Returns the square root of a number. Usage: result = Math.SquareRoot(number)",
    },
    "Array": {
        "ContainsIndex": "Checks if an array contains a specific index. Usage: result = Array.ContainsIndex(array, index)",
        "GetItemCount": "Gets the number of items in an array. Usage: count = Array.GetItemCount(array)",
        "GetValue": "Gets a value from an array. Usage: value = Array.GetValue(array, index)",
        "SetValue": "Sets a value in an array. Usage: Array.SetValue(array, index, value)",
    },
    "Text": {
        "Append": "Appends text to another text. Usage: result = Text.Append(text1, text2)",
        "GetLength": "Gets the length of text. Usage: length = Text.GetLength(text)",
        "GetSubText": "Gets a portion of text. Usage: result = Text.GetSubText(text, start, length)",
    },
}

_TRAILING_NAME = re.compile(r"([A-Za-z_][A-Za-z0-9_]*)\s*$")

# Members that are read or assigned rather than called
_PROPERTY_NAMES = {"BackgroundColor", "BrushColor", "Width", "Height", "Left", "Top", "Title"}

PARAMETER_HINTS_COMMAND = types.Command(
    title="Cursor between parentheses",
    command="editor.action.triggerParameterHints",
)


def is_property(member: str) -> bool:
    """Heuristic: a member is a property if it is a known setting or a coordinate."""
    return member in _PROPERTY_NAMES or member.endswith("X") or member.endswith("Y")


def find_object(name: str) -> str | None:
    """Find a library object by case-insensitive name."""
    lowered = name.lower()
    for object_name in OBJECTS:
        if object_name.lower() == lowered:
            return object_name
    return None


def keyword_documentation(keyword: str) -> str:
    return KEYWORD_DOCS.get(keyword, f"{keyword} is a Small Basic keyword")


def object_documentation(object_name: str) -> str:
    return OBJECT_DOCS.get(object_name, f"{object_name} is a Small Basic object")


def member_documentation(object_name: str, member: str) -> str:
    return MEMBER_DOCS.get(object_name, {}).get(
        member, f"{object_name}.{member} is a Small Basic method or property"
    )


class CompletionProvider:
    """
    Provides completion items for Small Basic LSP.

    Details and documentation are left out of the initial list and
    filled in by :meth:`resolve` when the editor asks for them.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or Settings()

    def get_completions(
        self, line_prefix: str, symbols: SymbolTable | None = None
    ) -> list[types.CompletionItem]:
        """
        Get completion items for a cursor position.

        Args:
            line_prefix: Text of the current line before the cursor
            symbols: Symbols of the current document

        Returns:
            List of completion items
        """
        if line_prefix.endswith("."):
            return self._member_completions(line_prefix[:-1])

        items = [
            types.CompletionItem(
                label=keyword,
                kind=types.CompletionItemKind.Keyword,
                data={"type": "keyword", "index": index},
            )
            for index, keyword in enumerate(KEYWORDS)
        ]
        items.extend(
            types.CompletionItem(
                label=object_name,
                kind=types.CompletionItemKind.Class,
                data={"type": "object", "name": object_name},
            )
            for object_name in OBJECTS
        )

        if symbols is not None:
            items.extend(self._symbol_completions(symbols))

        return items

    def _member_completions(self, before_dot: str) -> list[types.CompletionItem]:
        """Complete members of the object named just before the dot."""
        match = _TRAILING_NAME.search(before_dot)
        object_name = find_object(match.group(1)) if match else None
        if object_name is None:
            return []

        items = []
        for member in OBJECTS[object_name]:
            method = not is_property(member)
            item = types.CompletionItem(
                label=member,
                kind=types.CompletionItemKind.Method if method else types.CompletionItemKind.Property,
                data={"type": "member", "objectName": object_name, "memberName": member},
            )
            if method and self.settings.enable_auto_parentheses:
                item.insert_text = f"{member}()"
                item.command = PARAMETER_HINTS_COMMAND
            items.append(item)
        return items

    def _symbol_completions(self, symbols: SymbolTable) -> list[types.CompletionItem]:
        items = [
            types.CompletionItem(
                label=variable.name,
                kind=types.CompletionItemKind.Variable,
                detail=f"({variable.type_info})",
                data={"type": "variable", "name": variable.name},
            )
            for variable in symbols.variables
        ]

        for sub in symbols.subroutines:
            item = types.CompletionItem(
                label=sub.name,
                kind=types.CompletionItemKind.Function,
                data={"type": "subroutine", "name": sub.name},
            )
            if self.settings.enable_auto_parentheses:
                item.insert_text = f"{sub.name}()"
                item.command = PARAMETER_HINTS_COMMAND
            items.append(item)

        return items

    def resolve(self, item: types.CompletionItem) -> types.CompletionItem:
        """Fill in detail and documentation for a selected item."""
        data: Any = item.data
        if not isinstance(data, dict):
            return item

        item_type = data.get("type")
        if item_type == "keyword":
            index = data.get("index")
            if isinstance(index, int) and 0 <= index < len(KEYWORDS):
                keyword = KEYWORDS[index]
                item.detail = f"{keyword} keyword"
                item.documentation = keyword_documentation(keyword)
        elif item_type == "object":
            object_name = data.get("name")
            if object_name in OBJECTS:
                item.detail = f"{object_name} object"
                item.documentation = object_documentation(object_name)
        elif item_type == "member":
            object_name = data.get("objectName")
            member = data.get("memberName")
            if object_name and member:
                item.detail = f"{object_name}.{member}"
                item.documentation = member_documentation(object_name, member)

        return item
