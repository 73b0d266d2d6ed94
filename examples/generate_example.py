"""Generate example .properties files to see what the format looks like."""

import sys
sys.path.insert(0, str(__import__("pathlib").Path(__file__).parent.parent))

from proptab.table import PropertyTable

here = __import__("pathlib").Path(__file__).parent

defaults = PropertyTable({
    "server.host": "localhost",
    "server.port": "8080",
    "log.level": "info",
})
defaults.write(str(here / "defaults.properties"), "Shipped defaults\nEdit app.properties instead")

app = PropertyTable.with_defaults(defaults)
app.set("server.port", "9090")
app.set("greeting", " Hello, world!")
app.set("price label", "Price in \u20ac")
app.set("data dir", "C:\\data\\app")

nbytes = app.write(str(here / "app.properties"), "Local overrides")
ascii_bytes = app.write(str(here / "app-ascii.properties"), "Local overrides (ASCII-safe)", ascii=True)

print(f"Wrote app.properties ({nbytes} bytes) and app-ascii.properties ({ascii_bytes} bytes)")
print()
print(app.save_string("Local overrides"))
print("Resolved keys:")
for key in sorted(app.keys()):
    print(f"  {key} = {app.get(key)!r}")
