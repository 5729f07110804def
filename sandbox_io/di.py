# sandbox_io/di.py
from dataclasses import dataclass
from sandbox_io.config import Settings
from sandbox_io.services.path_resolver import PathResolver
from sandbox_io.services.sandbox import SandboxAuthority

@dataclass
class Container:
    settings: Settings
    sandbox: SandboxAuthority

def build_container(settings: Settings | None = None) -> Container:
    s = settings or Settings()
    sandbox = SandboxAuthority(PathResolver(s))
    return Container(s, sandbox)
