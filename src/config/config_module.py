from dataclasses import dataclass
from typing import Mapping

from injector import ClassAssistedBuilder, Module, provider, singleton

from .config import Config
from .loader import ConfigLoader


@dataclass
class ConfigModule(Module):
    environ: Mapping[str, str]

    @provider
    @singleton
    def provide_config_loader(self, builder: ClassAssistedBuilder[ConfigLoader]) -> ConfigLoader:
        return builder.build(environ=self.environ)

    @provider
    @singleton
    def provide_config(self, loader: ConfigLoader) -> Config:
        return loader.load_config()
