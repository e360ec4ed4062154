from harness import client, stderr
import harness

def rm_bucket(name, print_fn=stderr):
    try:
        for page in client('s3').get_paginator('list_objects_v2').paginate(Bucket=name):
            keys = [key['Key'] for key in page.get('Contents', [])]
            if keys:
                client('s3').delete_objects(Bucket=name, Delete={'Objects': [{'Key': key} for key in keys]})
                for key in keys:
                    print_fn(f'deleted object: s3://{name}/{key}')
        client('s3').delete_bucket(Bucket=name)
        print_fn(f'deleted bucket: s3://{name}')
    except client('s3').exceptions.NoSuchBucket:
        pass

def ensure_bucket(name, acl='private', print_fn=stderr, preview=False):
    if preview:
        print_fn(' preview:', name)
    else:
        kw = {}
        if harness.region() != 'us-east-1':
            kw['CreateBucketConfiguration'] = {'LocationConstraint': harness.region()}
        try:
            client('s3').create_bucket(ACL=acl, Bucket=name, **kw)
        except client('s3').exceptions.BucketAlreadyOwnedByYou:
            print_fn('', name)
        else:
            print_fn('', name)
        names = [bucket['Name'] for bucket in client('s3').list_buckets()['Buckets']]
        assert name in names, f'bucket was not created: {name}'
    return name

def put(bucket, key, path, print_fn=stderr):
    with open(path, 'rb') as f:
        resp = client('s3').put_object(Bucket=bucket, Key=key, Body=f)
    assert resp.get('ETag'), f'no etag for: s3://{bucket}/{key}'
    print_fn('', f's3://{bucket}/{key}')
    return resp['ETag']

def get(bucket, key):
    return client('s3').get_object(Bucket=bucket, Key=key)['Body'].read()
