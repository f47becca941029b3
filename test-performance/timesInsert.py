# Set PGSTREAM_TEST_DSN to the libpq connection string of a scratch database

import os
import time

import pypgstream

smallIterations = 100
largeIterations = smallIterations * 1000


def gettime():
    return time.time()


def insert_rows(count):
    for i in range(count):
        cursor.execute("INSERT INTO perf_test (a, b) VALUES ($1, 'A')", [i])


def insert_vector(count):
    result = connection.send_query("INSERT INTO perf_test (a, b) VALUES ($1, $2)")
    result.bind([list(range(count)), ['A'] * count])


def select(chunk_size):
    result = connection.send_query("SELECT * FROM perf_test")
    while not result.complete:
        result.fetch(chunk_size)


dropTable = "DROP TABLE IF EXISTS perf_test CASCADE"
createTable = "CREATE TABLE perf_test (a int, b char)"

dsn = os.environ.get('PGSTREAM_TEST_DSN')
if not dsn:
    dsn = 'dbname=test'

connection = pypgstream.connect(dsn)
cursor = connection.cursor()

# Begin SMALL_INSERT_ITERATIONS test
cursor.execute(dropTable)
cursor.execute(createTable)
start = gettime()
insert_rows(smallIterations)
smallInsertElapsed = gettime() - start

# Begin LARGE_VECTOR_INSERT test
cursor.execute(dropTable)
cursor.execute(createTable)
start = gettime()
insert_vector(largeIterations)
largeInsertElapsed = gettime() - start

# Begin SELECT test with the default chunk size and one huge chunk
start = gettime()
select(100)
smallChunkElapsed = gettime() - start
start = gettime()
select(-1)
singleChunkElapsed = gettime() - start

cursor.execute(dropTable)
connection.close()

print("Elapsed time for %d row inserts: %.3fs" % (smallIterations, smallInsertElapsed))
print("Elapsed time for one %d row vector insert: %.3fs" % (largeIterations, largeInsertElapsed))
print("Elapsed time to stream %d rows in chunks of 100: %.3fs" % (largeIterations, smallChunkElapsed))
print("Elapsed time to fetch %d rows in one chunk: %.3fs" % (largeIterations, singleChunkElapsed))
