"""Preview page — the HTML shell served at ``/``.

The page carries no rendered content itself.  A small script opens an
``EventSource`` on the live endpoint and replaces the ``#mdpreview-content``
element with each ``mdpreview:render`` event's data.  The browser's
EventSource reconnects on its own; a status badge shows when the
connection is down.
"""

from __future__ import annotations

import html
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from mdpreview.config import PreviewConfig


EVENTS_ENDPOINT = "/__mdpreview/events"
STATS_ENDPOINT = "/__mdpreview/stats"
RENDER_EVENT = "mdpreview:render"


_PAGE = """\
<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>{filename} — mdpreview</title>
<style>
*,*::before,*::after{{box-sizing:border-box}}
body{{margin:0;font-family:-apple-system,BlinkMacSystemFont,"Segoe UI",Helvetica,Arial,sans-serif;
  color:#24292f;background:#fff;line-height:1.6}}
header{{position:sticky;top:0;display:flex;justify-content:space-between;align-items:center;
  padding:0.5rem 1.5rem;background:#f6f8fa;border-bottom:1px solid #d0d7de;
  font-size:0.8rem;color:#57606a}}
header .file{{font-family:ui-monospace,SFMono-Regular,Menlo,Consolas,monospace}}
#mdpreview-status{{padding:0.1rem 0.5rem;border-radius:1rem;background:#dafbe1;color:#1a7f37}}
#mdpreview-status.down{{background:#ffebe9;color:#cf222e}}
main{{max-width:860px;margin:2rem auto;padding:0 1.5rem}}
pre{{background:#f6f8fa;padding:1rem;border-radius:6px;overflow-x:auto}}
code{{font-family:ui-monospace,SFMono-Regular,Menlo,Consolas,monospace;font-size:0.9em}}
table{{border-collapse:collapse}}
th,td{{border:1px solid #d0d7de;padding:0.3rem 0.8rem}}
blockquote{{margin:0;padding:0 1rem;color:#57606a;border-left:0.25rem solid #d0d7de}}
img{{max-width:100%}}
</style>
</head>
<body>
<header>
  <span class="file">{filename}</span>
  <span>serving on {address} <span id="mdpreview-status">live</span></span>
</header>
<main id="mdpreview-content"><p>Waiting for {filename}…</p></main>
<script data-mdpreview>
(function() {{
  var content = document.getElementById('mdpreview-content');
  var status = document.getElementById('mdpreview-status');
  var src = new EventSource('{endpoint}');
  src.addEventListener('{event}', function(e) {{
    content.innerHTML = e.data;
  }});
  src.onopen = function() {{
    status.textContent = 'live';
    status.classList.remove('down');
  }};
  src.onerror = function() {{
    status.textContent = 'disconnected';
    status.classList.add('down');
  }};
}})();
</script>
</body>
</html>
"""


def render_page(config: PreviewConfig) -> str:
    """Build the preview page for *config*'s file and address."""
    return _PAGE.format(
        filename=html.escape(config.filename),
        address=html.escape(f"{config.host}:{config.port}"),
        endpoint=EVENTS_ENDPOINT,
        event=RENDER_EVENT,
    )
