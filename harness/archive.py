import importlib.util
import io
import logging
import modulefinder
import os
import subprocess
import sys
import tempfile
import zipfile

zip_date_time = (1980, 1, 1, 0, 0, 0)

# stripped from pip installs, the runtime provides its own
excluded_requirements = {'pip', 'setuptools', 'wheel', 'pkg_resources', '_distutils_hack', 'easy_install.py', 'bin', '__pycache__'}

def _is_stdlib(name):
    return name.split('.')[0] in sys.stdlib_module_names

def _arcname(name, path, is_package):
    parts = name.split('.')
    if not is_package:
        parts = parts[:-1]
    return '/'.join(parts + [os.path.basename(path)])

def _root(name, path, is_package):
    """The sys.path entry a module was found under."""
    root = os.path.dirname(os.path.abspath(path))
    for _ in range(name.count('.') + (1 if is_package else 0)):
        root = os.path.dirname(root)
    return root

class Archive:
    """
    An in-memory lambda zip. Entries are kept as arcname -> bytes and
    written sorted with fixed timestamps, so identical inputs always
    produce identical zips.
    """

    def __init__(self, name='lambda.zip'):
        self.name = name
        self.entries = {}

    def __contains__(self, arcname):
        return arcname in self.entries

    def add_bytes(self, arcname, data):
        arcname = arcname.lstrip('/')
        if isinstance(data, str):
            data = data.encode('utf-8')
        assert self.entries.get(arcname, data) == data, f'conflicting content for: {arcname}'
        self.entries[arcname] = data
        return self

    def add_file(self, path, arcname=None):
        with open(path, 'rb') as f:
            return self.add_bytes(arcname or os.path.basename(path), f.read())

    def add_tree(self, path, prefix='', exclude=()):
        for dirpath, dirnames, filenames in os.walk(path):
            rel = os.path.relpath(dirpath, path)
            dirnames[:] = sorted(d for d in dirnames if d != '__pycache__' and not (rel == '.' and d in exclude))
            for filename in sorted(filenames):
                if rel == '.' and filename in exclude:
                    continue
                arcname = os.path.normpath(os.path.join(prefix, rel, filename)).replace(os.sep, '/')
                self.add_file(os.path.join(dirpath, filename), arcname)
        return self

    def add_module(self, name):
        """Add one module's source plus the __init__.py of every parent package."""
        parts = name.split('.')
        for i in range(1, len(parts) + 1):
            fqname = '.'.join(parts[:i])
            spec = importlib.util.find_spec(fqname)
            assert spec and spec.origin and os.path.isfile(spec.origin), f'no source for module: {fqname}'
            is_package = spec.submodule_search_locations is not None
            self.add_file(spec.origin, _arcname(fqname, spec.origin, is_package))
        return self

    def add_closure(self, name):
        """Add a module and every non-stdlib module it imports, transitively."""
        self.add_module(name)
        spec = importlib.util.find_spec(name)
        is_package = spec.submodule_search_locations is not None
        path = [_root(name, spec.origin, is_package)] + sys.path
        finder = modulefinder.ModuleFinder(path=path, excludes=sorted(sys.stdlib_module_names))
        finder.run_script(spec.origin)
        for fqname, module in sorted(finder.modules.items()):
            if fqname == '__main__' or not module.__file__ or _is_stdlib(fqname):
                continue
            self.add_file(module.__file__, _arcname(fqname, module.__file__, module.__path__ is not None))
        return self

    def add_requirements(self, requires, cwd=None):
        """pip install requirements into a scratch dir and add it at the archive root."""
        if requires:
            with tempfile.TemporaryDirectory() as tempdir:
                subprocess.check_call([sys.executable, '-m', 'pip', 'install', '--quiet', '--target', tempdir, *requires], cwd=cwd)
                exclude = {x for x in os.listdir(tempdir)
                           if x in excluded_requirements
                           or x.endswith('.dist-info')
                           or x.endswith('.egg-info')}
                self.add_tree(tempdir, exclude=exclude)
        return self

    def listing(self):
        lines = [f'{self.name}:']
        dirs = set()
        for arcname in sorted(self.entries):
            parts = arcname.split('/')[:-1]
            for i in range(1, len(parts) + 1):
                dirs.add('/'.join(parts[:i]) + '/')
        for path in sorted(dirs | set(self.entries)):
            lines.append('/' + path)
        return '\n'.join(lines)

    def to_bytes(self):
        buf = io.BytesIO()
        with zipfile.ZipFile(buf, 'w', zipfile.ZIP_DEFLATED) as zf:
            for arcname, data in sorted(self.entries.items()):
                info = zipfile.ZipInfo(arcname, date_time=zip_date_time)
                info.compress_type = zipfile.ZIP_DEFLATED
                info.external_attr = 0o644 << 16
                zf.writestr(info, data)
        return buf.getvalue()

    def write(self, path):
        with open(path, 'wb') as f:
            f.write(self.to_bytes())
        logging.info(self.listing())
        return path

    def write_temp(self, prefix='lambda-', suffix='.zip'):
        fd, path = tempfile.mkstemp(prefix=prefix, suffix=suffix)
        os.close(fd)
        return self.write(path)
