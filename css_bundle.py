import hashlib
import os
import re

from buildlog import warn

IMPORT_RE = re.compile(r'@import\s+["\'](.+?)["\'];')
BUNDLE_PREFIX = 'bundle'


def minify_css(css):
    """Remove comments, whitespace and unnecessary characters."""
    css = re.sub(r'/\*[\s\S]*?\*/', '', css)
    css = re.sub(r'\s+', ' ', css)
    css = re.sub(r'\s*([{}:;,])\s*', r'\1', css)
    css = css.replace(';}', '}')
    return css.strip()


class ImportFrame:
    """One stylesheet being inlined: its text, scan position and output so far."""

    def __init__(self, path):
        with open(path, 'r', encoding='utf-8') as f:
            self.content = f.read()
        self.base_dir = os.path.dirname(path)
        self.pos = 0
        self.parts = []


def inline_css(entry_path):
    """
    Inline every @import of the stylesheet at entry_path, depth first.

    Imports are resolved relative to the importing file. Each resolved file
    is inlined at most once per bundle, later imports of it (including
    cyclic ones) become empty. Missing imports are warned about and dropped.

    The walk keeps its own stack of open files, so import chain depth is
    not bounded by the interpreter's recursion limit.
    """
    entry = os.path.abspath(entry_path)
    seen = {entry}
    stack = [ImportFrame(entry)]

    while True:
        frame = stack[-1]
        match = IMPORT_RE.search(frame.content, frame.pos)

        if match is None:
            frame.parts.append(frame.content[frame.pos:])
            stack.pop()
            inlined = ''.join(frame.parts)
            if not stack:
                return inlined
            stack[-1].parts.append(inlined)
            continue

        frame.parts.append(frame.content[frame.pos:match.start()])
        frame.pos = match.end()

        resolved = os.path.normpath(os.path.join(frame.base_dir, match.group(1)))
        if resolved in seen:
            continue
        if not os.path.isfile(resolved):
            warn(f"Missing imported CSS: {resolved}")
            continue
        seen.add(resolved)
        stack.append(ImportFrame(resolved))


def content_hash(text, length=8):
    """Short MD5 digest used for cache busting."""
    return hashlib.md5(text.encode('utf-8')).hexdigest()[:length]


def hashed_filename(css):
    return f"{BUNDLE_PREFIX}.{content_hash(css)}.css"


def compile_bundle(entry_path, css_out_dir):
    """
    Bundle and minify the stylesheet at entry_path and write it under
    css_out_dir with its content hash in the filename.

    Returns the hashed filename for referencing in HTML.
    """
    minified = minify_css(inline_css(entry_path))
    filename = hashed_filename(minified)

    os.makedirs(css_out_dir, exist_ok=True)
    # newline='' keeps the bytes identical across platforms
    with open(os.path.join(css_out_dir, filename), 'w', encoding='utf-8', newline='') as f:
        f.write(minified)

    print(f"🎨 CSS bundled and minified with hash: {filename}")
    return filename
