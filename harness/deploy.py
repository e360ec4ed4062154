"""
The deploy/verify workflow: build, upload, register, invoke.

Each step is a direct call into the s3, iam and lambda clients. Any
failure propagates to the caller, the only checks are the assertions
on what each service hands back.
"""
import os
import harness.iam
import harness.lamda
import harness.s3
from harness import stderr
from harness.archive import Archive

default_bucket = 'test-bucket'
default_key = 'testing.zip'

def build(handler, closure=False):
    """
    Zip a handler. Without closure only the handler module and its parent
    packages go in, with closure everything it imports outside the stdlib
    goes in too. Any "# require:" comments are pip installed into the zip.
    """
    module = handler.rsplit('.', 1)[0]
    archive = Archive(f'{harness.lamda.name(handler)}.zip')
    if closure:
        archive.add_closure(module)
    else:
        archive.add_module(module)
    meta = harness.lamda.handler_metadata(handler)
    archive.add_requirements(meta.get('require', []), cwd=os.path.dirname(harness.lamda.module_path(handler)))
    return archive

def deploy(archive, handler, name=None, bucket=default_bucket, key=default_key, runtime=harness.lamda.runtime, description='Test Lambda Function', publish=True, preview=False):
    name = name or harness.lamda.name(handler)
    meta = harness.lamda.handler_metadata(handler)
    attrs = harness.lamda.attrs(meta)
    stderr('deploy:', name, handler)
    path = archive.write_temp()
    try:
        stderr('\nensure bucket:')
        harness.s3.ensure_bucket(bucket, preview=preview)
        if preview:
            stderr(' preview: upload:', f's3://{bucket}/{key}')
        else:
            stderr('\nupload:')
            harness.s3.put(bucket, key, path)
        role = harness.iam.ensure_role(name, 'lambda', preview=preview)
        return harness.lamda.create_function(name,
                                             handler,
                                             bucket,
                                             key,
                                             role,
                                             runtime=runtime,
                                             timeout=attrs['timeout'],
                                             memory=attrs['memory'],
                                             description=description,
                                             publish=publish,
                                             preview=preview)
    finally:
        os.remove(path)

def payload(request):
    if isinstance(request, (str, bytes)):
        return request
    return request.to_json()

def run(archive, handler, request, name=None, bucket=default_bucket, key=default_key, **kw):
    name = name or harness.lamda.name(handler)
    deploy(archive, handler, name=name, bucket=bucket, key=key, **kw)
    stderr('\ninvoke:', name)
    resp = harness.lamda.invoke(name, payload(request))
    stderr('', resp['StatusCode'], resp['Payload'])
    return resp

def rm(name, bucket=default_bucket, preview=False):
    harness.lamda.rm(name, preview=preview)
    if not preview:
        harness.iam.rm_role(name)
        harness.s3.rm_bucket(bucket)
