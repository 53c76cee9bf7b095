"""buildtree - Named build targets with late-bound dependencies, run at most once per run."""

from .buildfile import BuildScript as BuildScript
from .buildfile import TargetRef as TargetRef
from .buildfile import TaskRef as TaskRef
from .context import Context as Context
from .errors import ActionAlreadySetError as ActionAlreadySetError
from .errors import BuildError as BuildError
from .errors import BuildFileError as BuildFileError
from .errors import ConfigurationError as ConfigurationError
from .errors import DetachedTargetError as DetachedTargetError
from .errors import DuplicateTargetError as DuplicateTargetError
from .errors import NoDefaultTargetError as NoDefaultTargetError
from .errors import UnknownTargetError as UnknownTargetError
from .errors import UnknownTaskTypeError as UnknownTaskTypeError
from .errors import UnresolvedPropertyError as UnresolvedPropertyError
from .runner import Runner as Runner
from .targets import Target as Target
from .tasks import FunctionTask as FunctionTask
from .tasks import Task as Task
from .tasks import task as task
from .tree import TargetTree as TargetTree
