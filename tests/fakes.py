"""
Test doubles: a fake JDK tree with a scripted jlink.
"""

import os
import sys
import textwrap
from pathlib import Path

import pytest

# Stand-in for jlink: records argv next to the JDK, creates the output
# folder and behaves according to FAKE_JLINK_* environment variables.
_FAKE_JLINK = textwrap.dedent("""\
    #!{python}
    import json, os, sys
    from pathlib import Path

    here = Path(__file__).resolve().parent.parent
    (here / "last_args.json").write_text(json.dumps(sys.argv[1:]))

    sys.stdout.write(os.environ.get("FAKE_JLINK_STDOUT", ""))
    sys.stderr.write(os.environ.get("FAKE_JLINK_STDERR", ""))
    code = int(os.environ.get("FAKE_JLINK_EXIT", "0"))
    if code == 0 and "--output" in sys.argv:
        out = Path(sys.argv[sys.argv.index("--output") + 1])
        out.mkdir(parents=True)
        (out / "release").write_text("JAVA_VERSION=17")
    sys.exit(code)
""")

posix_only = pytest.mark.skipif(os.name == "nt", reason="scripted jlink needs a POSIX shebang")


def make_jdk(root: Path, with_jlink: bool = True) -> Path:
    """Create a minimal JDK tree: bin/, jmods/ and optionally bin/jlink."""
    (root / "bin").mkdir(parents=True, exist_ok=True)
    (root / "jmods").mkdir(exist_ok=True)
    (root / "jmods" / "java.base.jmod").write_bytes(b"JM")
    if with_jlink:
        jlink = root / "bin" / "jlink"
        jlink.write_text(_FAKE_JLINK.format(python=sys.executable))
        jlink.chmod(0o755)
    return root
