# type: ignore
import io
import os
import pytest
import sys
import zipfile
import harness.archive
import harness.deploy
from harness.archive import Archive

def names(archive):
    with zipfile.ZipFile(io.BytesIO(archive.to_bytes())) as zf:
        return sorted(zf.namelist())

def test_add_module_is_self_contained():
    archive = Archive().add_module('handlers.same_module')
    assert names(archive) == ['handlers/__init__.py', 'handlers/same_module.py']

def test_add_module_skips_imports():
    archive = Archive().add_module('handlers.other_module')
    assert 'inputs/__init__.py' not in archive
    assert names(archive) == ['handlers/__init__.py', 'handlers/other_module.py']

def test_add_closure_includes_dependencies():
    archive = Archive().add_closure('handlers.other_module')
    assert names(archive) == ['handlers/__init__.py', 'handlers/other_module.py', 'inputs/__init__.py']

def test_add_closure_skips_stdlib():
    archive = Archive().add_closure('handlers.same_module')
    assert names(archive) == ['handlers/__init__.py', 'handlers/same_module.py']

def test_missing_module():
    with pytest.raises(AssertionError):
        Archive().add_module('handlers.no_such_module')

def test_zip_is_deterministic():
    assert harness.deploy.build('handlers.other_module.main', closure=True).to_bytes() == harness.deploy.build('handlers.other_module.main', closure=True).to_bytes()

def test_zip_content_matches_source():
    archive = Archive().add_module('handlers.same_module')
    with zipfile.ZipFile(io.BytesIO(archive.to_bytes())) as zf:
        data = zf.read('handlers/same_module.py')
    with open(os.path.join(os.path.dirname(harness.deploy.__file__), '..', 'handlers', 'same_module.py'), 'rb') as f:
        assert data == f.read()

def test_listing():
    archive = Archive('lambda.zip').add_bytes('/handlers/same_module.py', 'x').add_bytes('handlers/__init__.py', '')
    assert archive.listing() == '\n'.join([
        'lambda.zip:',
        '/handlers/',
        '/handlers/__init__.py',
        '/handlers/same_module.py',
    ])

def test_conflicting_content():
    archive = Archive().add_bytes('a.py', 'x').add_bytes('a.py', 'x')
    with pytest.raises(AssertionError):
        archive.add_bytes('a.py', 'y')

def test_add_tree(tmp_path):
    (tmp_path / 'pkg').mkdir()
    (tmp_path / 'pkg' / '__init__.py').write_text('')
    (tmp_path / 'pkg' / '__pycache__').mkdir()
    (tmp_path / 'pkg' / '__pycache__' / 'x.pyc').write_text('')
    (tmp_path / 'skip.txt').write_text('')
    archive = Archive().add_tree(str(tmp_path), prefix='lib', exclude={'skip.txt'})
    assert names(archive) == ['lib/pkg/__init__.py']

def test_add_requirements(monkeypatch):
    calls = []
    def check_call(cmd, cwd=None):
        calls.append(cmd)
        target = cmd[cmd.index('--target') + 1]
        for path in ['foo.py', 'foo-1.0.dist-info/METADATA', 'pip/__init__.py', 'bar/__init__.py', 'bar/__pycache__/x.pyc', 'bin/foo']:
            path = os.path.join(target, path)
            os.makedirs(os.path.dirname(path), exist_ok=True)
            with open(path, 'w') as f:
                f.write('')
    monkeypatch.setattr(harness.archive.subprocess, 'check_call', check_call)
    archive = Archive().add_requirements(['foo==1.0'])
    assert names(archive) == ['bar/__init__.py', 'foo.py']
    [cmd] = calls
    assert cmd[:3] == [sys.executable, '-m', 'pip']
    assert cmd[-1] == 'foo==1.0'

def test_no_requirements_skips_pip(monkeypatch):
    monkeypatch.setattr(harness.archive.subprocess, 'check_call', lambda *a, **kw: pytest.fail('pip ran'))
    assert names(Archive().add_requirements([])) == []

def test_write_temp():
    path = Archive().add_module('handlers.same_module').write_temp()
    try:
        assert os.path.basename(path).startswith('lambda-')
        assert path.endswith('.zip')
        assert zipfile.is_zipfile(path)
    finally:
        os.remove(path)

if __name__ == "__main__":
    sys.exit(pytest.main([__file__, "-svvx", "--tb", "native"]))
