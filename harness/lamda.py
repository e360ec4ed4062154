from harness import stderr, client
import importlib.util
import io
import os
import re
import subprocess
import sys
import tempfile
import zipfile

runtime = 'python3.12'

default_attrs = {
    'memory': 128,
    'timeout': 15,
}

# runs inside a fresh interpreter rooted at the unpacked archive, like the lambda runtime does
bootstrap = '''
import importlib, json, sys, traceback
module_name, func_name = sys.argv[1].rsplit('.', 1)
event = json.loads(sys.stdin.read() or 'null')
try:
    result = getattr(importlib.import_module(module_name), func_name)(event, None)
except Exception as e:
    json.dump({'errorMessage': str(e), 'errorType': type(e).__name__, 'stackTrace': traceback.format_exc().splitlines()}, sys.stdout)
    sys.exit(1)
json.dump(result, sys.stdout)
'''

def name(handler):
    module = handler.rsplit('.', 1)[0]
    return module.split('.')[-1].replace(' ', '-').replace('_', '-')

def arn(name):
    return client('lambda').get_function(FunctionName=name)['Configuration']['FunctionArn']

def filter_metadata(lines):
    for line in lines:
        line = line.strip()
        if line.startswith('#') and ':' in line:
            yield line.strip('# ')
        if line.split() and line.split()[0] in {'import', 'from', 'def', 'class'}:
            break

def parse_metadata(token, lines, silent=False):
    vals = [(line, line.split(token, 1)[-1].split('#')[0].strip())
            for line in filter_metadata(lines)
            if line.startswith(token)]
    new_vals = []
    for line, val in vals:
        if '$' in val:
            try:
                val = ''.join([os.environ[part[2:-1]] if part.startswith('$') else part for part in re.split(r'(\$\{[^\}]+})', val)])
            except KeyError:
                assert False, f'missing environment: {line}'
        new_vals.append(val)
    vals = new_vals
    if vals and not silent:
        stderr(token)
        for val in vals:
            stderr('', val)
    return vals

def metadata(lines, silent=False):
    meta = {
        'attr':    parse_metadata('attr:', lines, silent),
        'require': parse_metadata('require:', lines, silent),
    }
    for line in meta['attr']:
        key, *value = line.split()
        assert key in default_attrs, f'unknown attr: "attr: {key}"'
        assert len(value) == 1 and value[0].isdigit(), f'bad attr value: "attr: {line}"'
    for line in filter_metadata(lines):
        token = line.split(':')[0]
        assert token in meta, f'unknown configuration comment: "{token}: ..."'
    for k, v in list(meta.items()):
        if not len(v):
            meta.pop(k)
    return meta

def module_path(handler):
    module = handler.rsplit('.', 1)[0]
    spec = importlib.util.find_spec(module)
    assert spec and spec.origin, f'no such module: {module}'
    return spec.origin

def handler_metadata(handler, silent=True):
    with open(module_path(handler)) as f:
        return metadata(f.read().splitlines(), silent=silent)

def attrs(meta):
    result = dict(default_attrs)
    for line in meta.get('attr', []):
        key, value = line.split()
        result[key] = int(value)
    return result

def create_function(name, handler, bucket, key, role, runtime=runtime, timeout=15, memory=128, description='Test Lambda Function', publish=True, preview=False):
    stderr('\ncreate function:')
    if preview:
        stderr(' preview:', name, handler)
        return None
    resp = client('lambda').create_function(
        FunctionName=name,
        Runtime=runtime,
        Role=role,
        Handler=handler,
        Code={'S3Bucket': bucket, 'S3Key': key},
        Description=description,
        Timeout=timeout,
        MemorySize=memory,
        Publish=publish,
    )
    assert resp.get('FunctionArn'), f'no function arn for: {name}'
    client('lambda').get_waiter('function_active_v2').wait(FunctionName=name)
    stderr('', resp['FunctionArn'])
    return resp['FunctionArn']

def invoke(name, payload):
    if isinstance(payload, str):
        payload = payload.encode('utf-8')
    resp = client('lambda').invoke(FunctionName=name, InvocationType='RequestResponse', Payload=payload)
    resp['Payload'] = resp['Payload'].read().decode('utf-8')
    return resp

def invoke_local(archive_bytes, handler, payload, timeout=15):
    with tempfile.TemporaryDirectory() as task_dir:
        with zipfile.ZipFile(io.BytesIO(archive_bytes)) as zf:
            zf.extractall(task_dir)
        proc = subprocess.run([sys.executable, '-S', '-B', '-c', bootstrap, handler],
                              input=payload,
                              capture_output=True,
                              text=True,
                              cwd=task_dir,
                              env={'PYTHONPATH': task_dir, 'PATH': os.environ.get('PATH', '')},
                              timeout=timeout)
    if proc.stderr:
        stderr(proc.stderr.rstrip())
    assert proc.returncode in {0, 1}, f'runtime exited {proc.returncode} for: {handler}'
    resp = {'StatusCode': 200, 'Payload': proc.stdout}
    if proc.returncode == 1:
        resp['FunctionError'] = 'Unhandled'
    return resp

def rm(name, preview=False):
    not_found = client('lambda').exceptions.ResourceNotFoundException
    if preview:
        stderr('preview: delete function:', name)
    else:
        try:
            client('lambda').delete_function(FunctionName=name)
        except not_found:
            pass
        else:
            stderr('deleted function:', name)
