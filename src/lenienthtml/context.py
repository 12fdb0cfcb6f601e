class ScanCursor:
    """Position and mode of one scan, passed explicitly through the scanner."""

    __slots__ = ("after_equals", "closing", "mode", "pos", "tag_name", "tag_start")

    DATA = 0
    TAG = 1
    RAW_TEXT = 2

    def __init__(self, pos=0):
        self.pos = pos
        self.mode = self.DATA
        self.tag_start = None
        self.tag_name = None
        self.closing = False
        self.after_equals = False

    def enter_tag(self, start, closing):
        self.mode = self.TAG
        self.tag_start = start
        self.tag_name = None
        self.closing = closing
        self.after_equals = False

    def __repr__(self):
        mode = ("DATA", "TAG", "RAW_TEXT")[self.mode]
        return f"ScanCursor({mode}, pos={self.pos}, tag={self.tag_name!r})"
